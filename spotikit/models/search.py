"""Search models."""

from enum import Enum
from typing import Optional

from .albums import SimpleAlbum
from .artists import Artist
from .base import SpotifyModel
from .paging import PagingObject
from .playlists import SimplePlaylist
from .tracks import Track


class SearchType(str, Enum):
    """Searchable resource types; the value is the ``type`` query value."""

    ALBUM = "album"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    TRACK = "track"

    @property
    def container_key(self) -> str:
        """Key the matching page is nested under in search responses."""
        return f"{self.value}s"


class SearchResult(SpotifyModel):
    albums: Optional[PagingObject[SimpleAlbum]] = None
    artists: Optional[PagingObject[Artist]] = None
    playlists: Optional[PagingObject[SimplePlaylist]] = None
    tracks: Optional[PagingObject[Track]] = None
