"""
Feed Publisher
=============

Writes serialized feeds to the publishing directory as
``feed.<language>.rss``, replacing any previous version.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from ..config.settings import get_settings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import PublishError


class FilesystemPublisher:
    """Publishes feed documents to a local (or mounted) directory."""

    def __init__(self, output_dir: Optional[str] = None):
        """Initialize publisher.

        Args:
            output_dir: Target directory (default from config)
        """
        self.output_dir = Path(output_dir or get_settings().publishing.output_dir)
        self.logger = get_logger_for_component("publisher")

    @staticmethod
    def feed_name(language_code: str) -> str:
        return f"feed.{language_code}.rss"

    def publish(self, data: bytes, language_code: str) -> Path:
        """Write ``data`` as the feed for ``language_code``.

        Returns:
            Path of the published file

        Raises:
            PublishError: If the file cannot be written
        """
        target = self.output_dir / self.feed_name(language_code)
        tmp_path = None

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            # Readers never see a partially written feed
            fd, tmp_path = tempfile.mkstemp(dir=self.output_dir, prefix=".feed-", suffix=".tmp")
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, target)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PublishError(f"Failed to publish {target}: {e}", target=str(target)) from e

        self.logger.info(
            f"Published {target.name} to {target.resolve()}",
            extra={"language": language_code, "size_bytes": len(data)},
        )
        return target
