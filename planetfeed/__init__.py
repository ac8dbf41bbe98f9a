"""
PlanetFeed - Combined Author Feed Aggregator
============================================

Merges the feeds of a roster of authors into one
newest-first combined RSS feed per language, plus a "mixed" feed.

Main Components:
- Ingestion: concurrent HTTP retrieval and feedparser parsing
- Recovery: bounded retry with superlinear backoff
- Processing: per-author failure isolation, keyword filter, aggregation
- Delivery: RSS 2.0 serialization and publishing
- Scheduler: recurring run across all languages
"""

__version__ = "1.0.0"
__author__ = "PlanetFeed Development Team"
__description__ = "Combined author feed aggregator"

from .config.settings import get_settings
from .models import Author, CombinedFeed, Contributor, FeedItem
from .processing.aggregator import FeedAggregator
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import PlanetFeedError, FeedError, FeedErrorKind

__all__ = [
    "get_settings",
    "Author",
    "CombinedFeed",
    "Contributor",
    "FeedItem",
    "FeedAggregator",
    "configure_application_logging",
    "get_logger_for_component",
    "PlanetFeedError",
    "FeedError",
    "FeedErrorKind",
]
