"""
Endpoint groups of the Spotify Web API.

Each group is a SpotifyEndpoint subclass attached to a SpotifyApi
instance; ``Client*`` groups need a user (authorization code) token.
"""

from .base import SpotifyEndpoint, build_params
from .albums import AlbumApi
from .artists import ArtistApi
from .browse import BrowseApi
from .following import ClientFollowingApi, FollowingApi
from .library import ClientLibraryApi, LibraryType
from .personalization import ClientPersonalizationApi, TimeRange
from .player import ClientPlayerApi
from .playlists import ClientPlaylistApi, PlaylistApi
from .search import SearchApi
from .tracks import TrackApi
from .users import ClientProfileApi, UserApi

__all__ = [
    'SpotifyEndpoint',
    'build_params',
    'AlbumApi',
    'ArtistApi',
    'BrowseApi',
    'ClientFollowingApi',
    'ClientLibraryApi',
    'ClientPersonalizationApi',
    'ClientPlayerApi',
    'ClientPlaylistApi',
    'ClientProfileApi',
    'FollowingApi',
    'LibraryType',
    'PlaylistApi',
    'SearchApi',
    'TimeRange',
    'TrackApi',
    'UserApi',
]
