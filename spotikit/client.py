"""
Spotify API handles.

A SpotifyApi instance owns one token store, one HTTP client, one
response cache and one worker pool, and exposes the endpoint groups
that share them. Use SpotifyApiBuilder (builder.py) to create one.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

import requests

from .auth import SpotifyAuthManager, Token, TokenValidityResponse
from .cache import InMemoryCacheBackend, SpotifyCache
from .config import SpotifyApiOptions
from .credentials import SpotifyCredentials
from .endpoints import (
    AlbumApi,
    ArtistApi,
    BrowseApi,
    ClientFollowingApi,
    ClientLibraryApi,
    ClientPersonalizationApi,
    ClientPlayerApi,
    ClientPlaylistApi,
    ClientProfileApi,
    FollowingApi,
    PlaylistApi,
    SearchApi,
    TrackApi,
    UserApi,
)
from .exceptions import SpotifyError, SpotifyTokenExpiredError
from .http_client import SpotifyHTTPClient
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class SpotifyApi:
    """
    Base API handle with the endpoint groups usable by any token.

    Args:
        token_store: Store holding this handle's token.
        credentials: Application credentials, if known.
        options: Client options; defaults to SpotifyApiOptions().
        auth_manager: Accounts-service client used for refreshes.
        cache: Response cache; an in-memory cache bounded by
            ``options.cache_limit`` is created when omitted.
        session: Optional preconfigured requests.Session.
        executor: Pool for queued actions; a pool of
            ``options.max_workers`` threads is created (and owned) when
            omitted.

    Example:
        with SpotifyApiBuilder(client_id, client_secret).build_app() as api:
            artist = api.artists.get_artist("0TnOYISbd1XYRBk9myaseg").complete()
    """

    def __init__(
        self,
        token_store: TokenStore,
        credentials: Optional[SpotifyCredentials] = None,
        options: Optional[SpotifyApiOptions] = None,
        auth_manager: Optional[SpotifyAuthManager] = None,
        cache: Optional[SpotifyCache] = None,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
    ):
        self._token_store = token_store
        self._credentials = credentials
        self._options = options or SpotifyApiOptions()
        self._auth_manager = auth_manager
        self._cache = cache or SpotifyCache(
            InMemoryCacheBackend(cache_limit=self._options.cache_limit)
        )
        self._http = SpotifyHTTPClient(
            token_store, self._options, cache=self._cache, session=session
        )
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self._options.max_workers, thread_name_prefix="spotikit"
        )
        self._closed = False

        self.albums = AlbumApi(self)
        self.artists = ArtistApi(self)
        self.browse = BrowseApi(self)
        self.search = SearchApi(self)
        self.tracks = TrackApi(self)
        self._init_user_endpoints()
        logger.debug(
            "%s initialized%s",
            type(self).__name__,
            " (with cache)" if self._options.use_cache else "",
        )

    def _init_user_endpoints(self) -> None:
        self.following = FollowingApi(self)
        self.playlists = PlaylistApi(self)
        self.users = UserApi(self)

    # -----------------------------------------------------------------
    # Accessors
    # -----------------------------------------------------------------

    @property
    def options(self) -> SpotifyApiOptions:
        return self._options

    @property
    def credentials(self) -> Optional[SpotifyCredentials]:
        return self._credentials

    @property
    def token(self) -> Token:
        """The current token (may have been refreshed)."""
        return self._token_store.token

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    @property
    def http_client(self) -> SpotifyHTTPClient:
        return self._http

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def cache(self) -> SpotifyCache:
        return self._cache

    @property
    def use_cache(self) -> bool:
        return self._options.use_cache

    @use_cache.setter
    def use_cache(self, enabled: bool) -> None:
        """Toggle response caching; turning it off empties the cache."""
        self._options.use_cache = enabled
        if not enabled:
            self.clear_cache()

    # -----------------------------------------------------------------
    # Token management
    # -----------------------------------------------------------------

    def refresh_token(self) -> Token:
        """
        Force a token refresh, regardless of expiry.

        Raises:
            SpotifyTokenError: If this handle cannot refresh its token.
            SpotifyAuthError: If the accounts service rejects the refresh.
        """
        return self._token_store.refresh()

    def is_token_valid(self, make_test_request: bool = True) -> TokenValidityResponse:
        """
        Check whether the current token works.

        Args:
            make_test_request: Also send a cheap request to confirm
                Spotify accepts the token.

        Returns:
            TokenValidityResponse carrying the failure, if any.
        """
        if self._token_store.needs_refresh:
            return TokenValidityResponse(
                False, SpotifyTokenExpiredError("Token needs to be refreshed")
            )
        if not make_test_request:
            return TokenValidityResponse(True)
        try:
            self.browse.get_available_genre_seeds().complete()
        except SpotifyError as e:
            logger.debug(f"Token validity check failed: {e}")
            return TokenValidityResponse(False, e)
        return TokenValidityResponse(True)

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    def clear_cache(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        """Close the HTTP session and shut down the owned worker pool."""
        if self._closed:
            return
        self._closed = True
        self._http.close()
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        logger.debug(f"{type(self).__name__} closed")

    def __enter__(self) -> "SpotifyApi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SpotifyAppApi(SpotifyApi):
    """
    Handle authenticated with application credentials only.

    Its token is renewed with the client credentials grant.
    """


class SpotifyClientApi(SpotifyApi):
    """
    Handle acting on behalf of a user (authorization code flow).

    Adds the endpoint groups that need a user token: the current user's
    profile, library, top items, follows, playlists and player.
    """

    def _init_user_endpoints(self) -> None:
        self.following = ClientFollowingApi(self)
        self.library = ClientLibraryApi(self)
        self.personalization = ClientPersonalizationApi(self)
        self.player = ClientPlayerApi(self)
        self.playlists = ClientPlaylistApi(self)
        self.users = ClientProfileApi(self)

    def get_user_id(self) -> str:
        """ID of the user this handle acts for."""
        return self.users.get_current_user().complete().id
