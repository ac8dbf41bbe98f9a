"""
PlanetFeed Ingestion Module
==========================

Remote feed retrieval and parsing.
"""

from .feed_fetcher import FeedFetcher

__all__ = ['FeedFetcher']
