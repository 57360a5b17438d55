"""
Builder for Spotify API handles.

Collects credentials, an authorization source and options, then
produces a SpotifyAppApi (client credentials flow) or a
SpotifyClientApi (authorization code flow), synchronously, on a worker
pool, or from asyncio code.
"""

import dataclasses
import logging
import time
from concurrent.futures import Executor, Future
from typing import Callable, Iterable, Optional

import requests

from .actions import SpotifyRestAction
from .auth import Clock, SpotifyAuthManager, SpotifyScope, Token
from .cache import SpotifyCache
from .client import SpotifyApi, SpotifyAppApi, SpotifyClientApi
from .config import SpotifyApiOptions
from .credentials import SpotifyCredentials
from .exceptions import SpotifyAuthError
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class SpotifyApiBuilder:
    """
    Fluent builder for API handles.

    Example (application credentials):
        api = SpotifyApiBuilder(client_id, client_secret).build_app()

    Example (user authorization):
        builder = SpotifyApiBuilder(client_id, client_secret, redirect_uri)
        url = builder.get_authorization_url([SpotifyScope.USER_TOP_READ])
        # ... user visits url, Spotify redirects back with ?code=...
        api = builder.authorization_code(code).build_client()

    Example (asyncio):
        api = await SpotifyApiBuilder(client_id, client_secret).suspend_build()
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        options: Optional[SpotifyApiOptions] = None,
    ):
        self._credentials = SpotifyCredentials(
            client_id=client_id, client_secret=client_secret, redirect_uri=redirect_uri
        )
        self._options = options or SpotifyApiOptions()
        self._authorization_code: Optional[str] = None
        self._token: Optional[Token] = None
        self._token_string: Optional[str] = None
        self._refresh_token_string: Optional[str] = None
        self._cache: Optional[SpotifyCache] = None
        self._session: Optional[requests.Session] = None
        self._executor: Optional[Executor] = None
        self._clock: Clock = time.time

    # -----------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------

    def credentials(self, credentials: SpotifyCredentials) -> "SpotifyApiBuilder":
        """Use a prepared credentials object (e.g. SpotifyCredentials.from_env())."""
        self._credentials = credentials
        if credentials.token_string:
            self.token_string(credentials.token_string)
        return self

    def options(self, options: SpotifyApiOptions) -> "SpotifyApiBuilder":
        self._options = options
        return self

    def with_options(self, **changes) -> "SpotifyApiBuilder":
        """Override individual options, e.g. ``with_options(use_cache=False)``."""
        self._options = dataclasses.replace(self._options, **changes)
        return self

    def authorization_code(self, code: str) -> "SpotifyApiBuilder":
        self._authorization_code = code
        return self

    def token(self, token: Token) -> "SpotifyApiBuilder":
        self._token = token
        self._token_string = None
        return self

    def token_string(self, access_token: str) -> "SpotifyApiBuilder":
        """
        Use a bare access token obtained elsewhere.

        Its lifetime is unknown, so it is assumed to last an hour and is
        never refreshed.
        """
        self._token = None
        self._token_string = access_token
        return self

    def refresh_token_string(self, refresh_token: str) -> "SpotifyApiBuilder":
        """Start from a stored refresh token; an access token is fetched at build."""
        self._refresh_token_string = refresh_token
        return self

    def cache(self, cache: SpotifyCache) -> "SpotifyApiBuilder":
        """Use a specific cache, e.g. one backed by RedisCacheBackend."""
        self._cache = cache
        return self

    def session(self, session: requests.Session) -> "SpotifyApiBuilder":
        self._session = session
        return self

    def executor(self, executor: Executor) -> "SpotifyApiBuilder":
        """Pool for queued actions; the handle creates its own when unset."""
        self._executor = executor
        return self

    def clock(self, clock: Callable[[], float]) -> "SpotifyApiBuilder":
        self._clock = clock
        return self

    def get_authorization_url(
        self,
        scopes: Iterable[SpotifyScope] = (),
        state: Optional[str] = None,
        show_dialog: bool = False,
    ) -> str:
        """URL the user must visit to authorize this application."""
        return self._auth_manager().get_auth_url(scopes, state=state, show_dialog=show_dialog)

    # -----------------------------------------------------------------
    # Building
    # -----------------------------------------------------------------

    def _auth_manager(self) -> SpotifyAuthManager:
        return SpotifyAuthManager(
            self._credentials, timeout=self._options.request_timeout, clock=self._clock
        )

    def _supplied_token(self) -> Optional[Token]:
        if self._token_string is not None:
            return Token.from_access_token(self._token_string, clock=self._clock)
        return self._token

    def _finish(self, api_class, token: Token, refresher) -> SpotifyApi:
        options = dataclasses.replace(self._options)
        store = TokenStore(
            token,
            refresher=refresher,
            automatic_refresh=options.automatic_refresh,
            leeway=options.token_expiry_leeway,
        )
        api = api_class(
            store,
            credentials=self._credentials,
            options=options,
            auth_manager=self._auth_manager(),
            cache=self._cache,
            session=self._session,
            executor=self._executor,
        )
        if options.test_token_validity:
            validity = api.is_token_valid()
            if not validity.is_valid:
                api.close()
                raise SpotifyAuthError(
                    f"Token is not valid: {validity.exception}"
                ) from validity.exception
        logger.info(f"Built {api_class.__name__}")
        return api

    def build_app(self) -> SpotifyAppApi:
        """
        Build a handle using application credentials.

        A supplied token is used as is; otherwise a client credentials
        token is requested. The token is renewed with the same grant.

        Raises:
            SpotifyTokenError: If no token is supplied and the client
                id/secret are missing or rejected.
        """
        auth_manager = self._auth_manager()
        token = self._supplied_token() or auth_manager.request_client_credentials_token()

        def renew(_stale: Token) -> Token:
            return auth_manager.request_client_credentials_token()

        refresher = renew if self._credentials.has_client_secret else None
        return self._finish(SpotifyAppApi, token, refresher)

    def build_client(self) -> SpotifyClientApi:
        """
        Build a handle acting on behalf of a user.

        The token comes from, in order: a supplied token, a refresh token
        string, or an authorization code.

        Raises:
            SpotifyAuthError: If no authorization source was given.
            SpotifyTokenError: If the token exchange fails.
        """
        auth_manager = self._auth_manager()
        token = self._supplied_token() or self._obtain_user_token(auth_manager)
        refresher = None
        if self._credentials.has_client_secret and token.refresh_token:
            refresher = auth_manager.refresh_token
        return self._finish(SpotifyClientApi, token, refresher)

    def _obtain_user_token(self, auth_manager: SpotifyAuthManager) -> Token:
        if self._refresh_token_string:
            stale = Token(
                access_token="",
                token_type="Bearer",
                expires_at=0,
                refresh_token=self._refresh_token_string,
                clock=self._clock,
            )
            return auth_manager.refresh_token(stale)
        if self._authorization_code:
            return auth_manager.exchange_code(self._authorization_code)
        raise SpotifyAuthError(
            "A token, refresh token or authorization code is required "
            "to build a client API"
        )

    def _build(self, client: bool) -> SpotifyApi:
        return self.build_client() if client else self.build_app()

    def build_async(self, client: bool = False) -> "Future[SpotifyApi]":
        """Build on a worker thread; the Future resolves to the handle."""
        return SpotifyRestAction(lambda: self._build(client), self._executor).queue()

    async def suspend_build(self, client: bool = False) -> SpotifyApi:
        """Build without blocking the running event loop."""
        return await SpotifyRestAction(lambda: self._build(client), self._executor).suspend()
