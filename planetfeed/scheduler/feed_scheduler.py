#!/usr/bin/env python3
"""
PlanetFeed Scheduler
===================

One aggregation run: load the roster, then build, serialize and publish
the combined feed for every roster language plus "mixed".

Designed to be called repeatedly by run_scheduler.py, cron, or a systemd
timer.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ..config.settings import get_settings
from ..delivery.feed_publisher import FilesystemPublisher
from ..delivery.rss_serializer import RssSerializer
from ..models import Author
from ..processing.aggregator import FeedAggregator, MIXED_LANGUAGE
from ..storage.author_repository import AuthorRepository
from ..utils.logging import get_logger_for_component, PerformanceLogger
from ..utils.exceptions import PlanetFeedError


class FeedScheduler:
    """Coordinates a full run across all feed languages."""

    def __init__(self,
                 settings=None,
                 repository: Optional[AuthorRepository] = None,
                 aggregator: Optional[FeedAggregator] = None,
                 serializer: Optional[RssSerializer] = None,
                 publisher: Optional[FilesystemPublisher] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger_for_component("scheduler")
        self.repository = repository or AuthorRepository(self.settings.roster.path)
        self.aggregator = aggregator or FeedAggregator(self.settings)
        self.serializer = serializer or RssSerializer()
        self.publisher = publisher or FilesystemPublisher(self.settings.publishing.output_dir)

    @staticmethod
    def languages_for(authors: List[Author]) -> List[str]:
        """Roster languages followed by the "mixed" feed."""
        return AuthorRepository.get_language_codes(authors) + [MIXED_LANGUAGE]

    async def run_once(self) -> Dict[str, Any]:
        """
        Execute one complete run.

        Returns:
            Dictionary with per-language results and run metrics

        Raises:
            RosterError: If the author roster cannot be loaded
        """
        start_time = datetime.now()
        execution_id = f"run_{start_time.strftime('%Y%m%d_%H%M%S')}"

        self.logger.info(f"Timer triggered feed run at: {start_time}", extra={"execution_id": execution_id})

        authors = self.repository.get_all_authors()
        languages = self.languages_for(authors)

        language_results = []
        errors = []
        for language in languages:
            try:
                language_results.append(await self._process_language(authors, language))
            except PlanetFeedError as e:
                self.logger.error(
                    f"{language} feed failed: {e}",
                    extra={**e.to_dict(), "language": language},
                )
                errors.append({"language": language, "error": str(e)})
                language_results.append(
                    {"language": language, "success": False, "error": str(e), "item_count": 0}
                )

        duration = (datetime.now() - start_time).total_seconds()
        result = {
            "execution_id": execution_id,
            "success": not errors,
            "author_count": len(authors),
            "languages": language_results,
            "errors": errors,
            "duration_seconds": duration,
        }

        self.logger.info(
            f"Feed run completed: {len(languages) - len(errors)}/{len(languages)} feeds published",
            extra={"execution_id": execution_id, "duration_seconds": duration, "success": result["success"]},
        )
        return result

    async def _process_language(self, authors: List[Author], language: str) -> Dict[str, Any]:
        self.logger.info(f"Loading {language} combined author feed", extra={"language": language})

        with PerformanceLogger(self.logger, f"{language} feed", language=language) as timer:
            feed = await self.aggregator.aggregate(authors, language, None)
            data = self.serializer.serialize(feed)
            path = self.publisher.publish(data, language)

        return {
            "language": language,
            "success": True,
            "item_count": len(feed.items),
            "contributor_count": len(feed.contributors),
            "path": str(path),
            "duration_seconds": timer.duration,
        }

    @staticmethod
    def format_run_summary(result: Dict[str, Any]) -> str:
        """Human-readable multi-line summary of a run result."""
        status = "SUCCESS" if result["success"] else "FAILED"
        lines = [
            f"PlanetFeed run {result['execution_id']}: {status}",
            f"Authors: {result['author_count']}, duration: {result['duration_seconds']:.1f}s",
        ]
        for entry in result["languages"]:
            if entry["success"]:
                lines.append(f"  {entry['language']:>6}: {entry['item_count']} items -> {entry['path']}")
            else:
                lines.append(f"  {entry['language']:>6}: error: {entry['error']}")
        return "\n".join(lines)
