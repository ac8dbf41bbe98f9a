"""
Feed Aggregator
==============

Builds one combined feed from the feeds of a set of authors:

- select authors by language ("mixed" selects everyone)
- read every (author, feed URI) source concurrently, waiting for all
- keep items that mention the marker keyword
- drop items dated in the future
- sort newest first by effective timestamp (stable), then truncate
- wrap the result in the configured feed envelope
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from ..config.settings import get_settings
from ..ingestion.feed_fetcher import FeedFetcher
from ..models import Author, CombinedFeed, Contributor, FeedItem
from ..recovery.retry_logic import RetryConfig, RetryPolicy
from ..utils.logging import get_logger_for_component
from .content_filter import ContentFilter
from .source_reader import SourceReader


MIXED_LANGUAGE = "mixed"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FeedAggregator:
    """Aggregates authors' feeds into a CombinedFeed."""

    def __init__(self,
                 settings=None,
                 fetcher: Optional[FeedFetcher] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 content_filter: Optional[ContentFilter] = None,
                 clock: Callable[[], datetime] = _utc_now):
        """Initialize aggregator.

        Args:
            settings: PlanetFeed settings (default: global settings)
            fetcher: Feed fetcher (default built from settings)
            retry_policy: Retry policy shared by all fetches
            content_filter: Inclusion predicate
            clock: Returns the current UTC time
        """
        self.settings = settings or get_settings()
        self.fetcher = fetcher or FeedFetcher()
        self.retry_policy = retry_policy or RetryPolicy(RetryConfig.from_settings(self.settings))
        self.content_filter = content_filter or ContentFilter.from_settings(self.settings)
        self.clock = clock
        self.max_concurrent = self.settings.fetching.max_concurrent
        self.logger = get_logger_for_component("aggregator")

    @staticmethod
    def select_authors(authors: Iterable[Author], language_code: str) -> List[Author]:
        """Authors contributing to ``language_code``; exact, case-sensitive match."""
        if language_code == MIXED_LANGUAGE:
            return list(authors)
        return [author for author in authors if author.language_code == language_code]

    async def aggregate(self,
                        authors: Sequence[Author],
                        language_code: str = MIXED_LANGUAGE,
                        max_items: Optional[int] = None) -> CombinedFeed:
        """Build the combined feed for one language.

        Args:
            authors: Full author roster
            language_code: ISO 639-1 code, or "mixed" for all authors
            max_items: Keep at most this many items (None keeps all)

        Returns:
            CombinedFeed, newest item first
        """
        if max_items is not None and max_items < 0:
            raise ValueError(f"max_items must be non-negative, got {max_items}")

        selected = self.select_authors(authors, language_code)

        self.logger.info(
            f"Loading feed for language: {language_code} for {len(selected)} authors",
            extra={"language": language_code, "author_count": len(selected)},
        )

        items = await self._read_all(selected)
        return self.build_combined_feed(items, selected, language_code, max_items, self.clock())

    async def _read_all(self, authors: Sequence[Author]) -> List[FeedItem]:
        """Read every source; returns once all of them have finished."""
        if not authors:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)
        async with self.fetcher.get_session() as session:
            reader = SourceReader(self.fetcher, self.retry_policy, session, semaphore)
            results = await asyncio.gather(
                *(reader.read_author_feeds(author) for author in authors)
            )

        return [item for author_items in results for item in author_items]

    def build_combined_feed(self,
                            items: Iterable[FeedItem],
                            authors: Sequence[Author],
                            language_code: str,
                            max_items: Optional[int],
                            now: datetime) -> CombinedFeed:
        """Filter, order and truncate items and wrap them in the feed envelope."""
        pool = list(items)
        relevant = [item for item in pool if self.content_filter.include(item)]
        current = [item for item in relevant if item.effective_timestamp <= now]

        # sorted() is stable, including with reverse=True
        ordered = sorted(current, key=lambda item: item.effective_timestamp, reverse=True)
        if max_items is not None:
            ordered = ordered[:max_items]

        self.logger.info(
            f"Combined {language_code} feed: {len(ordered)} items "
            f"({len(pool)} fetched, {len(pool) - len(relevant)} off-topic, "
            f"{len(relevant) - len(current)} future-dated)",
            extra={"language": language_code, "item_count": len(ordered)},
        )

        feed_settings = self.settings.feed
        return CombinedFeed(
            title=feed_settings.title,
            description=feed_settings.description,
            url=str(feed_settings.url),
            image_url=str(feed_settings.image_url),
            language=language_code,
            last_updated=now,
            copyright=feed_settings.copyright,
            contributors=tuple(Contributor.from_author(author) for author in authors),
            items=tuple(ordered),
        )
