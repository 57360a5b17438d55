"""
Spotikit Models Package.

Pydantic models for Spotify Web API responses, plus the paged result
sets that can fetch their neighbouring pages.

Usage:
    from spotikit.models import Artist, Track, PagingObject
"""

from .base import (
    Followers,
    SpotifyImage,
    SpotifyModel,
    SpotifyResource,
    parse_model,
    parse_model_list,
)
from .paging import (
    AbstractPagingObject,
    Cursor,
    CursorBasedPagingObject,
    CursorState,
    PagingCursor,
    PagingObject,
)
from .artists import Artist, SimpleArtist
from .tracks import AudioFeatures, SavedTrack, SimpleTrack, Track
from .albums import Album, SavedAlbum, SimpleAlbum
from .users import PrivateUser, PublicUser
from .playlists import (
    Playlist,
    PlaylistTrack,
    PlaylistTrackInfo,
    SimplePlaylist,
    SnapshotResponse,
)
from .player import (
    CurrentlyPlayingContext,
    CurrentlyPlayingObject,
    Device,
    PlaybackContext,
    PlayerRepeatState,
    PlayHistory,
)
from .browse import (
    FeaturedPlaylists,
    RecommendationResponse,
    RecommendationSeed,
    SpotifyCategory,
)
from .search import SearchResult, SearchType

__all__ = [
    # Base
    'Followers',
    'SpotifyImage',
    'SpotifyModel',
    'SpotifyResource',
    'parse_model',
    'parse_model_list',

    # Paging
    'AbstractPagingObject',
    'Cursor',
    'CursorBasedPagingObject',
    'CursorState',
    'PagingCursor',
    'PagingObject',

    # Catalog
    'Album',
    'Artist',
    'AudioFeatures',
    'SavedAlbum',
    'SavedTrack',
    'SimpleAlbum',
    'SimpleArtist',
    'SimpleTrack',
    'Track',

    # Users and playlists
    'Playlist',
    'PlaylistTrack',
    'PlaylistTrackInfo',
    'PrivateUser',
    'PublicUser',
    'SimplePlaylist',
    'SnapshotResponse',

    # Player
    'CurrentlyPlayingContext',
    'CurrentlyPlayingObject',
    'Device',
    'PlaybackContext',
    'PlayerRepeatState',
    'PlayHistory',

    # Browse and search
    'FeaturedPlaylists',
    'RecommendationResponse',
    'RecommendationSeed',
    'SearchResult',
    'SearchType',
    'SpotifyCategory',
]
