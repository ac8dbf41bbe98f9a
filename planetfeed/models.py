"""
PlanetFeed Data Models
=====================

Author roster entries, feed items and the combined feed value produced by
each aggregation run.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, AnyHttpUrl


# Stand-in for a missing publish/update date; sorts after every real date
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


class GeoPosition(BaseModel):
    """Author location."""
    latitude: float = Field(..., alias="lat")
    longitude: float = Field(..., alias="lon")

    model_config = {"populate_by_name": True, "frozen": True}


class Author(BaseModel):
    """Roster entry for one author. Read-only once loaded."""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    state_or_region: str = Field(default="", alias="stateOrRegion")
    email_address: str = Field(..., alias="emailAddress")
    short_bio_or_tag_line: str = Field(default="", alias="tagOrBio")
    website: AnyHttpUrl = Field(..., alias="webSite")
    twitter_handle: str = Field(default="", alias="twitterHandle")
    github_handle: str = Field(..., alias="githubHandle")
    gravatar_hash: str = Field(default="", alias="gravatarHash")
    feed_uris: List[AnyHttpUrl] = Field(..., alias="feedUris")
    position: Optional[GeoPosition] = Field(default=None)
    # ISO 639-1, lowercase, 2 letters
    language_code: str = Field(..., alias="languageCode")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"Author({self.full_name}:{self.language_code})"


@dataclass(frozen=True)
class FeedItem:
    """
    One entry parsed from a remote feed.

    Missing dates are stored as MIN_TIMESTAMP so that the effective
    timestamp stays well defined.
    """
    title: Optional[str]
    link: Optional[str]
    published: datetime = MIN_TIMESTAMP
    updated: datetime = MIN_TIMESTAMP
    summary: Optional[str] = None
    categories: Tuple[str, ...] = ()
    extensions: Mapping[str, str] = field(default_factory=dict)
    guid: Optional[str] = None
    author: Optional[str] = None
    source_feed: Optional[str] = None

    @property
    def effective_timestamp(self) -> datetime:
        """Ordering key: the later of publish and last-updated time."""
        return max(self.published, self.updated)

    @property
    def is_dated(self) -> bool:
        return self.effective_timestamp != MIN_TIMESTAMP


@dataclass(frozen=True)
class Contributor:
    """Author credit attached to a combined feed."""
    name: str
    email: str
    website: str

    @classmethod
    def from_author(cls, author: Author) -> "Contributor":
        return cls(
            name=author.full_name,
            email=author.email_address,
            website=str(author.website),
        )


@dataclass(frozen=True)
class CombinedFeed:
    """Assembled output of one aggregation run.

    Items are ordered newest first by effective timestamp.
    """
    title: str
    description: str
    url: str
    image_url: str
    language: str
    last_updated: datetime
    copyright: Optional[str] = None
    contributors: Tuple[Contributor, ...] = ()
    items: Tuple[FeedItem, ...] = ()

    def __len__(self) -> int:
        return len(self.items)
