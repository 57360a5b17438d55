"""Playlist models."""

from typing import List, Optional

from pydantic import Field

from .base import Followers, SpotifyImage, SpotifyModel, SpotifyResource
from .paging import PagingObject
from .tracks import Track
from .users import PublicUser


class PlaylistTrackInfo(SpotifyModel):
    """The ``tracks`` stub of a simplified playlist."""

    href: Optional[str] = None
    total: int = 0


class PlaylistTrack(SpotifyModel):
    added_at: Optional[str] = None
    added_by: Optional[PublicUser] = None
    is_local: bool = False
    track: Optional[Track] = None


class SimplePlaylist(SpotifyResource):
    name: str = ""
    collaborative: bool = False
    description: Optional[str] = None
    images: List[SpotifyImage] = Field(default_factory=list)
    owner: Optional[PublicUser] = None
    public: Optional[bool] = None
    snapshot_id: Optional[str] = None
    tracks: Optional[PlaylistTrackInfo] = None
    type: str = "playlist"


class Playlist(SimplePlaylist):
    """Full playlist object including the first page of its tracks."""

    followers: Optional[Followers] = None
    tracks: Optional[PagingObject[PlaylistTrack]] = None


class SnapshotResponse(SpotifyModel):
    """Returned by playlist mutations; identifies the new playlist version."""

    snapshot_id: str
