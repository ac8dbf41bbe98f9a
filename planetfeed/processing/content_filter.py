"""
Content Filter
=============

Keyword predicate deciding which fetched items belong in the combined feed.
"""

from typing import Optional

from ..models import FeedItem
from ..utils.exceptions import ConfigurationError


class ContentFilter:
    """Case-insensitive marker keyword match on title, categories and keywords."""

    def __init__(self, marker_keyword: str, keyword_field: str = "keywords"):
        """Initialize content filter.

        Args:
            marker_keyword: Term an item must mention to be included
            keyword_field: Extension element holding the item's keywords
        """
        if not marker_keyword or not marker_keyword.strip():
            raise ConfigurationError(
                "Marker keyword must not be blank", config_key="feed.marker_keyword"
            )
        self.marker_keyword = marker_keyword.strip()
        self.keyword_field = keyword_field
        self._needle = self.marker_keyword.casefold()

    @classmethod
    def from_settings(cls, settings) -> "ContentFilter":
        return cls(settings.feed.marker_keyword, settings.feed.keyword_field)

    def _mentions_marker(self, text: Optional[str]) -> bool:
        return bool(text) and self._needle in text.casefold()

    def include(self, item: FeedItem) -> bool:
        """Return True when the item mentions the marker keyword."""
        if self._mentions_marker(item.title):
            return True

        if any(self._mentions_marker(category) for category in item.categories):
            return True

        return self._mentions_marker(item.extensions.get(self.keyword_field))

    def __call__(self, item: FeedItem) -> bool:
        return self.include(item)
