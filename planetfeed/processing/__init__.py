"""
PlanetFeed Processing Module
===========================

Aggregation pipeline: per-author source reading, content filtering and
combined feed assembly.
"""

from .aggregator import FeedAggregator, MIXED_LANGUAGE
from .content_filter import ContentFilter
from .source_reader import SourceReader

__all__ = [
    'FeedAggregator',
    'MIXED_LANGUAGE',
    'ContentFilter',
    'SourceReader',
]
