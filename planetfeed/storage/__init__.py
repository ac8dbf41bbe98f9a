"""
PlanetFeed Storage Module
========================

Read access to the author roster.
"""

from .author_repository import AuthorRepository

__all__ = ['AuthorRepository']
