"""Track models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .artists import SimpleArtist
from .base import SpotifyModel, SpotifyResource


class SimpleTrack(SpotifyResource):
    name: str = ""
    artists: List[SimpleArtist] = Field(default_factory=list)
    available_markets: List[str] = Field(default_factory=list)
    disc_number: int = 1
    duration_ms: int = 0
    explicit: bool = False
    is_local: bool = False
    is_playable: Optional[bool] = None
    preview_url: Optional[str] = None
    track_number: int = 0
    type: str = "track"


class Track(SimpleTrack):
    """
    Full track object.

    ``album`` refers to SimpleAlbum, which is resolved once albums.py
    has been imported.
    """

    album: Optional["SimpleAlbum"] = None
    external_ids: Dict[str, str] = Field(default_factory=dict)
    popularity: int = 0


class SavedTrack(SpotifyModel):
    added_at: Optional[str] = None
    track: Track


class AudioFeatures(SpotifyModel):
    id: str
    uri: Optional[str] = None
    acousticness: Optional[float] = None
    danceability: Optional[float] = None
    duration_ms: Optional[int] = None
    energy: Optional[float] = None
    instrumentalness: Optional[float] = None
    key: Optional[int] = None
    liveness: Optional[float] = None
    loudness: Optional[float] = None
    mode: Optional[int] = None
    speechiness: Optional[float] = None
    tempo: Optional[float] = None
    time_signature: Optional[int] = None
    valence: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
