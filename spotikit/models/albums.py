"""Album models."""

from typing import List, Optional

from pydantic import Field

from .artists import SimpleArtist
from .base import SpotifyImage, SpotifyModel, SpotifyResource
from .paging import PagingObject
from .tracks import SavedTrack, SimpleTrack, Track


class SimpleAlbum(SpotifyResource):
    name: str = ""
    album_type: Optional[str] = None
    album_group: Optional[str] = None
    artists: List[SimpleArtist] = Field(default_factory=list)
    available_markets: List[str] = Field(default_factory=list)
    images: List[SpotifyImage] = Field(default_factory=list)
    release_date: Optional[str] = None
    release_date_precision: Optional[str] = None
    total_tracks: Optional[int] = None
    type: str = "album"


class Album(SimpleAlbum):
    """Full album object including the first page of its tracks."""

    genres: List[str] = Field(default_factory=list)
    label: Optional[str] = None
    popularity: int = 0
    tracks: Optional[PagingObject[SimpleTrack]] = None


class SavedAlbum(SpotifyModel):
    added_at: Optional[str] = None
    album: Album


# Track.album refers back to SimpleAlbum
Track.model_rebuild()
SavedTrack.model_rebuild()
