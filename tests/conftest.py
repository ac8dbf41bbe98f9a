"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for PlanetFeed tests.
"""

import pytest
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["PLANETFEED_FEED__TITLE"] = "Planet Test"
os.environ["PLANETFEED_FEED__DESCRIPTION"] = "Test combined feed"
os.environ["PLANETFEED_FEED__URL"] = "https://planet.test/"
os.environ["PLANETFEED_FEED__IMAGE_URL"] = "https://planet.test/logo.png"
os.environ["PLANETFEED_FEED__MARKER_KEYWORD"] = "python"
os.environ["PLANETFEED_LOGGING__FILE_PATH"] = ""
os.environ["PLANETFEED_LOGGING__CONSOLE_LOGGING"] = "false"


NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed wall-clock time used by aggregation tests."""
    return NOW


@pytest.fixture
def make_author():
    """Factory for roster authors."""
    from planetfeed.models import Author

    def _make(first_name="Ada", last_name="Lovelace", language_code="en", feed_uris=None, **kwargs):
        slug = first_name.lower()
        return Author(
            first_name=first_name,
            last_name=last_name,
            email_address=kwargs.pop("email_address", f"{slug}@example.com"),
            website=kwargs.pop("website", f"https://{slug}.example.com/"),
            github_handle=kwargs.pop("github_handle", slug),
            feed_uris=feed_uris or [f"https://{slug}.example.com/feed.xml"],
            language_code=language_code,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_item():
    """Factory for feed items dated relative to NOW."""
    from planetfeed.models import FeedItem

    def _make(title="Python tips", hours_ago=1, updated_hours_ago=None, **kwargs):
        published = NOW - timedelta(hours=hours_ago)
        updated = NOW - timedelta(hours=updated_hours_ago) if updated_hours_ago is not None else published
        return FeedItem(
            title=title,
            link=kwargs.pop("link", f"https://example.com/{title.lower().replace(' ', '-')}"),
            published=published,
            updated=updated,
            **kwargs,
        )

    return _make


@pytest.fixture
def no_sleep():
    """Awaitable stand-in for asyncio.sleep that records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def settings():
    """Freshly loaded settings from the test environment."""
    from planetfeed.config.settings import get_settings

    return get_settings(reload=True)


@pytest.fixture(autouse=True)
def reset_settings():
    """Drop the cached settings so environment changes never leak between tests."""
    yield
    import planetfeed.config.settings as settings_module

    settings_module._settings = None
