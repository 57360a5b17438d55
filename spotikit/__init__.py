"""
Typed client for the Spotify Web API.

Architecture:
    - credentials.py / config.py: SpotifyCredentials and SpotifyApiOptions
    - auth.py: Token, scopes and the accounts-service client
    - token_store.py: TokenStore with coalesced refresh
    - http_client.py: authenticated request executor
    - cache.py: optional response cache (in-memory or Redis)
    - actions.py: SpotifyRestAction (complete / queue / suspend)
    - models/: pydantic response models and paged result sets
    - endpoints/: endpoint groups (artists, playlists, player, ...)
    - client.py / builder.py: API handles and their builder

Usage:
    from spotikit import SpotifyApiBuilder

    with SpotifyApiBuilder(client_id, client_secret).build_app() as api:
        artist = api.artists.get_artist("0TnOYISbd1XYRBk9myaseg").complete()
        api.search.search_track("harder better").queue(
            on_error=print, on_success=lambda page: print(page.total)
        )
"""

import logging

# Credentials and options
from .credentials import SpotifyCredentials
from .config import SpotifyApiOptions

# Auth (token management)
from .auth import (
    SpotifyAuthManager,
    SpotifyScope,
    Token,
    TokenValidityResponse,
    get_authorization_url,
)
from .token_store import TokenState, TokenStore

# Requests
from .actions import (
    CancellationToken,
    SpotifyRestAction,
    SpotifyRestActionPaging,
)
from .cache import InMemoryCacheBackend, RedisCacheBackend, SpotifyCache
from .http_client import SpotifyHTTPClient

# Paging
from .models import (
    CursorBasedPagingObject,
    CursorState,
    PagingCursor,
    PagingObject,
)

# Handles
from .client import SpotifyApi, SpotifyAppApi, SpotifyClientApi
from .builder import SpotifyApiBuilder

# Exceptions
from .exceptions import (
    SpotifyError,
    SpotifyAuthError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
    SpotifyAPIError,
    SpotifyBadRequestError,
    SpotifyNotFoundError,
    SpotifyForbiddenError,
    SpotifyRateLimitError,
    SpotifyServerError,
    SpotifyNetworkError,
    SpotifyParseError,
    SpotifyCancelledError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Credentials and options
    'SpotifyCredentials',
    'SpotifyApiOptions',

    # Auth
    'SpotifyAuthManager',
    'SpotifyScope',
    'Token',
    'TokenValidityResponse',
    'get_authorization_url',
    'TokenState',
    'TokenStore',

    # Requests
    'CancellationToken',
    'SpotifyRestAction',
    'SpotifyRestActionPaging',
    'InMemoryCacheBackend',
    'RedisCacheBackend',
    'SpotifyCache',
    'SpotifyHTTPClient',

    # Paging
    'CursorBasedPagingObject',
    'CursorState',
    'PagingCursor',
    'PagingObject',

    # Handles
    'SpotifyApi',
    'SpotifyAppApi',
    'SpotifyClientApi',
    'SpotifyApiBuilder',

    # Exceptions
    'SpotifyError',
    'SpotifyAuthError',
    'SpotifyTokenError',
    'SpotifyTokenExpiredError',
    'SpotifyAPIError',
    'SpotifyBadRequestError',
    'SpotifyNotFoundError',
    'SpotifyForbiddenError',
    'SpotifyRateLimitError',
    'SpotifyServerError',
    'SpotifyNetworkError',
    'SpotifyParseError',
    'SpotifyCancelledError',
]
