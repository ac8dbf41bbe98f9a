"""
Author Repository
================

Read-only access to the author roster, stored as a JSON array of author
documents.
"""

import json
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ..config.settings import get_settings
from ..models import Author
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import RosterError, ErrorCode


_AUTHOR_LIST = TypeAdapter(List[Author])


class AuthorRepository:
    """Repository for the author roster."""

    def __init__(self, path: Optional[str] = None):
        """Initialize author repository.

        Args:
            path: Roster JSON file (default from config)
        """
        self.path = Path(path or get_settings().roster.path)
        self.logger = get_logger_for_component("author_repository")

    def get_all_authors(self) -> List[Author]:
        """Load every author in the roster.

        Raises:
            RosterError: If the roster is missing or malformed
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise RosterError(
                f"Author roster not found: {self.path}",
                path=str(self.path),
                error_code=ErrorCode.ROSTER_NOT_FOUND,
            ) from e
        except OSError as e:
            raise RosterError(f"Failed to read author roster: {e}", path=str(self.path)) from e

        try:
            authors = _AUTHOR_LIST.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise RosterError(f"Invalid author roster: {e}", path=str(self.path)) from e

        self.logger.info(f"Loaded {len(authors)} authors from {self.path}")
        return authors

    @staticmethod
    def get_language_codes(authors: List[Author]) -> List[str]:
        """Distinct language codes used by the roster, sorted."""
        return sorted({author.language_code for author in authors})
