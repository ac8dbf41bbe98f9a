"""
Unit Tests for Source Reader
===========================

Tests for per-author concurrent reads and failure isolation.
"""

import asyncio
import pytest
from unittest.mock import MagicMock

from planetfeed.processing.source_reader import SourceReader
from planetfeed.recovery.retry_logic import RetryPolicy
from planetfeed.utils.exceptions import FeedError, FeedErrorKind


class ScriptedFetcher:
    """Fetcher stand-in that answers from a per-URL script of outcomes."""

    def __init__(self, script):
        self.script = {url: list(outcomes) for url, outcomes in script.items()}
        self.calls = []

    async def fetch(self, feed_url, session):
        self.calls.append(feed_url)
        outcome = self.script[feed_url].pop(0) if len(self.script[feed_url]) > 1 else self.script[feed_url][0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _timeout(url):
    return FeedError("Request timed out", kind=FeedErrorKind.TIMEOUT, feed_url=url)


class TestSourceReader:
    """Test reading all feeds of one author."""

    @pytest.mark.asyncio
    async def test_concatenates_all_feeds(self, make_author, make_item, no_sleep):
        first, second = "https://ada.example.com/a.xml", "https://ada.example.com/b.xml"
        author = make_author(feed_uris=[first, second])
        item_a, item_b, item_c = make_item("Python a"), make_item("Python b"), make_item("Python c")
        fetcher = ScriptedFetcher({first: [[item_a, item_b]], second: [[item_c]]})
        reader = SourceReader(fetcher, RetryPolicy(sleep=no_sleep), session=MagicMock())

        items = await reader.read_author_feeds(author)

        assert items == [item_a, item_b, item_c]

    @pytest.mark.asyncio
    async def test_failed_feed_isolated(self, make_author, make_item, no_sleep):
        good, bad = "https://ada.example.com/good.xml", "https://ada.example.com/bad.xml"
        author = make_author(feed_uris=[bad, good])
        item = make_item("Python good")
        fetcher = ScriptedFetcher({bad: [_timeout(bad)], good: [[item]]})
        reader = SourceReader(fetcher, RetryPolicy(sleep=no_sleep), session=MagicMock())

        items = await reader.read_author_feeds(author)

        assert items == [item]
        # initial attempt plus two retries for the failing feed
        assert fetcher.calls.count(bad) == 3
        assert fetcher.calls.count(good) == 1

    @pytest.mark.asyncio
    async def test_transient_failure_recovered(self, make_author, make_item, no_sleep):
        url = "https://ada.example.com/feed.xml"
        author = make_author(feed_uris=[url])
        item = make_item("Python flaky")
        fetcher = ScriptedFetcher({url: [_timeout(url), [item]]})
        reader = SourceReader(fetcher, RetryPolicy(sleep=no_sleep), session=MagicMock())

        assert await reader.read_author_feeds(author) == [item]
        assert no_sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_all_feeds_failing_yields_empty(self, make_author, no_sleep):
        url = "https://ada.example.com/feed.xml"
        author = make_author(feed_uris=[url])
        fetcher = ScriptedFetcher({url: [_timeout(url)]})
        reader = SourceReader(fetcher, RetryPolicy(sleep=no_sleep), session=MagicMock())

        assert await reader.read_author_feeds(author) == []

    @pytest.mark.asyncio
    async def test_semaphore_caps_requests_in_flight(self, make_author, no_sleep):
        urls = [f"https://ada.example.com/{n}.xml" for n in range(5)]
        author = make_author(feed_uris=urls)
        in_flight = 0
        peak = 0

        class SlowFetcher:
            async def fetch(self, feed_url, session):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return []

        reader = SourceReader(SlowFetcher(), RetryPolicy(sleep=no_sleep), MagicMock(),
                              semaphore=asyncio.Semaphore(2))

        assert await reader.read_author_feeds(author) == []
        assert peak == 2
