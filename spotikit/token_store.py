"""
Token storage with coalesced refresh.

Every request made through one API instance asks the same TokenStore for
a token. Refreshes are serialized by a lock, and a caller that observed a
stale token while another thread was already refreshing simply picks up
the new token instead of issuing a second refresh.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .auth import Token
from .exceptions import (
    SpotifyAuthError,
    SpotifyError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
)

logger = logging.getLogger(__name__)

TokenRefresher = Callable[[Token], Token]


class TokenState(Enum):
    VALID = "valid"
    NEEDS_REFRESH = "needs_refresh"


class TokenStore:
    """
    Holds the current token of an API instance and renews it.

    Args:
        token: Initial token.
        refresher: Callable producing a new token from the current one;
            None when the token cannot be refreshed (e.g. a bare token
            string was supplied).
        automatic_refresh: Refresh expired tokens on demand instead of
            raising SpotifyTokenExpiredError.
        leeway: Seconds before expiry at which the token is treated as
            expired.
    """

    def __init__(
        self,
        token: Token,
        refresher: Optional[TokenRefresher] = None,
        automatic_refresh: bool = True,
        leeway: float = 0.0,
    ):
        self._token = token
        self._refresher = refresher
        self._automatic_refresh = automatic_refresh
        self._leeway = leeway
        self._lock = threading.Lock()
        self._refresh_count = 0
        self._issued: Optional[Token] = None
        self._issued_lifetime: Optional[float] = None

    def _expires_soon(self, token: Token) -> bool:
        leeway = self._leeway
        if token is self._issued and self._issued_lifetime is not None:
            # Freshly issued tokens stay usable for at least half their lifetime
            leeway = min(leeway, self._issued_lifetime / 2)
        return token.expires_within(leeway)

    @property
    def token(self) -> Token:
        """The stored token, without any validity check."""
        return self._token

    @property
    def state(self) -> TokenState:
        if self._expires_soon(self._token):
            return TokenState.NEEDS_REFRESH
        return TokenState.VALID

    @property
    def needs_refresh(self) -> bool:
        return self.state is TokenState.NEEDS_REFRESH

    @property
    def can_refresh(self) -> bool:
        """Whether a 401 or an expired token may be handled by refreshing."""
        return self._automatic_refresh and self._refresher is not None

    @property
    def refresh_count(self) -> int:
        """Number of refreshes performed so far."""
        return self._refresh_count

    def current_token(self) -> Token:
        """
        Return a token that is valid right now.

        Raises:
            SpotifyTokenExpiredError: If the token expired and automatic
                refresh is disabled.
            SpotifyAuthError: If the refresh fails.
        """
        token = self._token
        if not self._expires_soon(token):
            return token
        if not self._automatic_refresh:
            raise SpotifyTokenExpiredError(
                "The access token has expired and automatic refresh is disabled"
            )
        logger.info("Token expired, refreshing...")
        return self.refresh(stale=token)

    def refresh(self, stale: Optional[Token] = None) -> Token:
        """
        Replace the stored token with a freshly issued one.

        Args:
            stale: The token the caller found unusable. If another caller
                has already replaced it with a valid token, that token is
                returned and no refresh call is made.

        Returns:
            The new current token.

        Raises:
            SpotifyTokenError: If the token cannot be refreshed.
            SpotifyAuthError: If the refresh call is rejected.
        """
        with self._lock:
            current = self._token
            if (
                stale is not None
                and current is not stale
                and not self._expires_soon(current)
            ):
                logger.debug("Token already refreshed by another caller")
                return current

            if self._refresher is None:
                raise SpotifyTokenError(
                    "Cannot refresh: no refresh credentials available"
                )

            try:
                new_token = self._refresher(current)
            except SpotifyAuthError:
                raise
            except SpotifyError as e:
                logger.error(f"Token refresh failed: {e}")
                raise SpotifyAuthError(f"Token refresh failed: {e}") from e

            if new_token.is_expired:
                raise SpotifyTokenError("Refresh returned an expired token")

            self._token = new_token
            self._issued = new_token
            self._issued_lifetime = new_token.expires_at - new_token.clock()
            self._refresh_count += 1
            return new_token

    def replace(self, token: Token) -> None:
        """Store a token obtained outside the store (e.g. a new login)."""
        with self._lock:
            self._token = token
