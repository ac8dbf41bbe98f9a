"""
Remote Feed Fetcher
==================

Retrieves one syndication document over HTTP(S) and parses it into
FeedItem values. Every network, timeout, status or parse failure surfaces
as a single retryable FeedError.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp
import certifi
import feedparser

from ..config.settings import get_settings
from ..models import FeedItem, MIN_TIMESTAMP
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedError, FeedErrorKind


# Entry keys feedparser fills from core RSS/Atom elements; anything else
# with a text value is treated as an extension element.
STANDARD_ENTRY_FIELDS = {
    "id",
    "guid",
    "title",
    "link",
    "summary",
    "description",
    "published",
    "updated",
    "created",
    "expired",
    "author",
    "comments",
    "license",
    "publisher",
    "language",
}


class FeedFetcher:
    """Fetches and parses a single remote feed."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None,
                 max_connections: Optional[int] = None):
        """Initialize feed fetcher.

        Args:
            timeout: Request timeout in seconds (default from config)
            user_agent: Client signature (default from config)
            max_connections: Connection pool size (default from config)
        """
        settings = get_settings()
        self.timeout = timeout or settings.fetching.request_timeout
        self.user_agent = user_agent or settings.fetching.user_agent
        self.max_connections = max_connections or settings.fetching.max_concurrent
        self.logger = get_logger_for_component("feed_fetcher")

        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        """Get configured aiohttp session, shared by all fetches of a run."""
        connector = aiohttp.TCPConnector(
            ssl=self.ssl_context,
            limit=self.max_connections,
            enable_cleanup_closed=True,
        )

        timeout = aiohttp.ClientTimeout(total=self.timeout)

        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
        }

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout, headers=headers
        ) as session:
            yield session

    async def fetch(self, feed_url: str, session: aiohttp.ClientSession) -> List[FeedItem]:
        """Fetch and parse a single feed.

        Args:
            feed_url: URI of the feed document
            session: Shared aiohttp session

        Returns:
            Parsed feed items, unfiltered

        Raises:
            FeedError: On transport, timeout, HTTP status or parse failure
        """
        self.logger.info(f"Loading feed {feed_url}", extra={"feed_url": feed_url})

        try:
            content = await self._download(feed_url, session)
            return self.parse(content, feed_url)
        except FeedError as e:
            self.logger.error(
                f"Loading feed {feed_url} failed: {e} (cause: {e.cause!r})",
                extra=e.to_dict(),
            )
            raise

    async def _download(self, feed_url: str, session: aiohttp.ClientSession) -> bytes:
        try:
            async with session.get(feed_url) as response:
                if not 200 <= response.status < 300:
                    raise FeedError(
                        f"HTTP {response.status}: {response.reason}",
                        kind=FeedErrorKind.HTTP_STATUS,
                        feed_url=feed_url,
                        status_code=response.status,
                    )
                return await response.read()

        # aiohttp timeouts subclass both TimeoutError and ClientError
        except asyncio.TimeoutError as e:
            raise FeedError(
                f"Request timed out after {self.timeout}s",
                kind=FeedErrorKind.TIMEOUT,
                feed_url=feed_url,
                cause=e,
            ) from e

        except aiohttp.ClientError as e:
            raise FeedError(
                f"Transport error: {e}",
                kind=FeedErrorKind.TRANSPORT,
                feed_url=feed_url,
                cause=e,
            ) from e

    def parse(self, content: bytes, feed_url: str) -> List[FeedItem]:
        """Parse a feed document into FeedItem values.

        Raises:
            FeedError: With kind PARSE when the payload is not a usable feed
        """
        try:
            feed_data = feedparser.parse(content)
        except Exception as e:
            raise FeedError(
                f"Feed parse error: {e}",
                kind=FeedErrorKind.PARSE,
                feed_url=feed_url,
                cause=e,
            ) from e

        entries = feed_data.get("entries") or []
        if not entries and (feed_data.get("bozo") or not feed_data.get("version")):
            cause = feed_data.get("bozo_exception")
            detail = cause or "not a recognised RSS/Atom document"
            raise FeedError(
                f"Feed parse error: {detail}",
                kind=FeedErrorKind.PARSE,
                feed_url=feed_url,
                cause=cause,
            )

        return [self._parse_entry(entry, feed_url) for entry in entries]

    def _parse_entry(self, entry: Dict[str, Any], feed_url: str) -> FeedItem:
        """Convert one feedparser entry to a FeedItem."""
        categories = tuple(
            tag["term"] for tag in entry.get("tags") or [] if tag.get("term")
        )

        return FeedItem(
            title=entry.get("title"),
            link=entry.get("link"),
            published=_parse_date(entry, "published_parsed"),
            updated=_parse_date(entry, "updated_parsed"),
            summary=entry.get("summary"),
            categories=categories,
            extensions=_extract_extensions(entry),
            guid=entry.get("id"),
            author=entry.get("author"),
            source_feed=feed_url,
        )


def _parse_date(entry: Dict[str, Any], key: str) -> datetime:
    """Read a feedparser UTC time tuple as an aware datetime."""
    # dict.get skips feedparser's updated -> published key fallback
    date_tuple = dict.get(entry, key)
    if not date_tuple:
        return MIN_TIMESTAMP
    try:
        return datetime(*date_tuple[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return MIN_TIMESTAMP


def _extract_extensions(entry: Dict[str, Any]) -> Dict[str, str]:
    """Collect extension elements as a name -> text mapping.

    feedparser names namespaced elements ``prefix_local``; the mapping is
    keyed by the local name, first occurrence wins.
    """
    extensions: Dict[str, str] = {}
    for key, value in entry.items():
        if key in STANDARD_ENTRY_FIELDS or not isinstance(value, str):
            continue
        name = key.split("_", 1)[1] if "_" in key else key
        if name and name not in STANDARD_ENTRY_FIELDS:
            extensions.setdefault(name, value)
    return extensions
