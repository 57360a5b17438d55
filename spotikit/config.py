"""
Client options.

Defaults live on the dataclass; ``SpotifyApiOptions.from_env()`` lets
deployments override them through ``SPOTIFY_*`` environment variables
(or a ``.env`` file).
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

_TRUE_VALUES = ('1', 'true', 'yes', 'on')
_FALSE_VALUES = ('0', 'false', 'no', 'off')


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _env_number(name: str, default, cast, allow_none: bool = False):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    if allow_none and raw.strip().lower() == 'none':
        return None
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class SpotifyApiOptions:
    """
    Behavioural switches for a Spotify API instance.

    Attributes:
        automatic_refresh: Refresh expired tokens instead of failing.
        use_cache: Cache GET responses that Spotify marks cacheable.
        cache_limit: Maximum number of cached responses (None = no limit).
        retry_on_server_error: Retry 5xx responses with backoff.
        retry_when_rate_limited: Wait out 429 responses and retry.
        token_expiry_leeway: Seconds before expiry at which a token is
            already treated as expired.
        test_token_validity: Make a lightweight request at build time to
            check the token.
        request_timeout: Per-request timeout in seconds.
        max_workers: Size of the worker pool used by queued actions.
    """

    automatic_refresh: bool = True
    use_cache: bool = True
    cache_limit: Optional[int] = 200
    retry_on_server_error: bool = False
    retry_when_rate_limited: bool = False
    token_expiry_leeway: float = 0.0
    test_token_validity: bool = False
    request_timeout: float = 30.0
    max_workers: int = 4

    def __post_init__(self):
        if self.cache_limit is not None and self.cache_limit < 0:
            raise ValueError("cache_limit must be >= 0")
        if self.token_expiry_leeway < 0:
            raise ValueError("token_expiry_leeway must be >= 0")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

    @classmethod
    def enable_all(cls) -> 'SpotifyApiOptions':
        """Options with every optional utility switched on."""
        return cls(
            automatic_refresh=True,
            use_cache=True,
            retry_on_server_error=True,
            retry_when_rate_limited=True,
            test_token_validity=True,
        )

    @classmethod
    def from_env(cls) -> 'SpotifyApiOptions':
        """
        Create options from environment variables.

        Unset variables keep the dataclass defaults.

        Raises:
            ValueError: If a variable cannot be parsed.
        """
        load_dotenv()
        defaults = cls()
        return cls(
            automatic_refresh=_env_bool(
                'SPOTIFY_AUTOMATIC_REFRESH', defaults.automatic_refresh
            ),
            use_cache=_env_bool('SPOTIFY_USE_CACHE', defaults.use_cache),
            cache_limit=_env_number(
                'SPOTIFY_CACHE_LIMIT', defaults.cache_limit, int,
                allow_none=True,
            ),
            retry_on_server_error=_env_bool(
                'SPOTIFY_RETRY_ON_SERVER_ERROR', defaults.retry_on_server_error
            ),
            retry_when_rate_limited=_env_bool(
                'SPOTIFY_RETRY_WHEN_RATE_LIMITED',
                defaults.retry_when_rate_limited,
            ),
            token_expiry_leeway=_env_number(
                'SPOTIFY_TOKEN_EXPIRY_LEEWAY', defaults.token_expiry_leeway, float
            ),
            test_token_validity=_env_bool(
                'SPOTIFY_TEST_TOKEN_VALIDITY', defaults.test_token_validity
            ),
            request_timeout=_env_number(
                'SPOTIFY_REQUEST_TIMEOUT', defaults.request_timeout, float
            ),
            max_workers=_env_number(
                'SPOTIFY_MAX_WORKERS', defaults.max_workers, int
            ),
        )
