"""Artist models."""

from typing import List, Optional

from pydantic import Field

from .base import Followers, SpotifyImage, SpotifyResource


class SimpleArtist(SpotifyResource):
    name: str = ""
    type: str = "artist"


class Artist(SimpleArtist):
    """Full artist object, as returned by /artists/{id}."""

    followers: Optional[Followers] = None
    genres: List[str] = Field(default_factory=list)
    images: List[SpotifyImage] = Field(default_factory=list)
    popularity: int = 0
