"""
Source Reader
============

Reads every feed URI of one author concurrently through the retry policy.
This is the failure isolation boundary: a feed that still fails after its
retries contributes no items and never affects sibling feeds.
"""

import asyncio
from typing import List, Optional

import aiohttp

from ..ingestion.feed_fetcher import FeedFetcher
from ..models import Author, FeedItem
from ..recovery.retry_logic import RetryPolicy
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedError


class SourceReader:
    """Best-effort reader for an author's feeds within one aggregation run."""

    def __init__(self,
                 fetcher: FeedFetcher,
                 retry_policy: RetryPolicy,
                 session: aiohttp.ClientSession,
                 semaphore: Optional[asyncio.Semaphore] = None):
        """Initialize source reader.

        Args:
            fetcher: Feed fetcher
            retry_policy: Shared retry policy
            session: HTTP session shared by the run
            semaphore: Optional cap on requests in flight
        """
        self.fetcher = fetcher
        self.retry_policy = retry_policy
        self.session = session
        self.semaphore = semaphore
        self.logger = get_logger_for_component("source_reader")

    async def read_author_feeds(self, author: Author) -> List[FeedItem]:
        """Fetch all of an author's feeds. Never raises FeedError."""
        results = await asyncio.gather(
            *(self._try_read_feed(author, str(uri)) for uri in author.feed_uris)
        )
        return [item for items in results for item in items]

    async def _try_read_feed(self, author: Author, feed_url: str) -> List[FeedItem]:
        try:
            return await self.retry_policy.retry_async(
                self._fetch,
                feed_url,
                context={"feed_url": feed_url, "author": author.full_name},
            )
        except FeedError as e:
            self.logger.error(
                f"{author.full_name}'s feed of {feed_url} failed to load: {e}",
                extra={**e.to_dict(), "author": author.full_name, "feed_url": feed_url},
            )
            return []

    async def _fetch(self, feed_url: str) -> List[FeedItem]:
        # Held per attempt only, so retry delays do not occupy a slot
        if self.semaphore is None:
            return await self.fetcher.fetch(feed_url, self.session)
        async with self.semaphore:
            return await self.fetcher.fetch(feed_url, self.session)
