"""
Spotify authentication and token management.

Handles authorization URL generation and the three token grants the
client supports (authorization code, refresh token, client credentials).
Token storage and refresh coordination live in token_store.py.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Tuple
from urllib.parse import urlencode

import requests

from .credentials import SpotifyCredentials
from .exceptions import (
    SpotifyAuthError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
)

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"

Clock = Callable[[], float]


class SpotifyScope(str, Enum):
    """Authorization scopes a user can grant to an application."""

    APP_REMOTE_CONTROL = "app-remote-control"
    PLAYLIST_READ_PRIVATE = "playlist-read-private"
    PLAYLIST_READ_COLLABORATIVE = "playlist-read-collaborative"
    PLAYLIST_MODIFY_PUBLIC = "playlist-modify-public"
    PLAYLIST_MODIFY_PRIVATE = "playlist-modify-private"
    STREAMING = "streaming"
    UGC_IMAGE_UPLOAD = "ugc-image-upload"
    USER_FOLLOW_MODIFY = "user-follow-modify"
    USER_FOLLOW_READ = "user-follow-read"
    USER_LIBRARY_READ = "user-library-read"
    USER_LIBRARY_MODIFY = "user-library-modify"
    USER_MODIFY_PLAYBACK_STATE = "user-modify-playback-state"
    USER_READ_PRIVATE = "user-read-private"
    USER_READ_EMAIL = "user-read-email"
    USER_TOP_READ = "user-top-read"
    USER_READ_PLAYBACK_STATE = "user-read-playback-state"
    USER_READ_CURRENTLY_PLAYING = "user-read-currently-playing"
    USER_READ_RECENTLY_PLAYED = "user-read-recently-played"

    @classmethod
    def parse(cls, scope_string: Optional[str]) -> Tuple["SpotifyScope", ...]:
        """
        Parse a space-separated scope string.

        Unknown scopes are dropped and duplicates collapsed; the order in
        which Spotify listed them is kept.
        """
        if not scope_string:
            return ()
        known = {scope.value: scope for scope in cls}
        scopes = []
        for raw in scope_string.split():
            scope = known.get(raw.lower())
            if scope is not None and scope not in scopes:
                scopes.append(scope)
        return tuple(scopes)


@dataclass
class Token:
    """
    Structured container for an OAuth access token.

    ``expires_at`` is an absolute epoch timestamp so the token can be
    stored and restored without losing track of its lifetime.
    """

    access_token: str
    token_type: str
    expires_at: float
    refresh_token: Optional[str] = None
    scopes: Tuple[SpotifyScope, ...] = ()
    clock: Clock = field(default=time.time, repr=False, compare=False)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], clock: Clock = time.time
    ) -> "Token":
        """
        Create a Token from an accounts-service response.

        Args:
            data: Token dictionary from Spotify OAuth.
            clock: Time source used to anchor ``expires_in``.

        Returns:
            Token instance.

        Raises:
            SpotifyTokenError: If required fields are missing.
        """
        if not isinstance(data, dict):
            raise SpotifyTokenError(
                f"Token data must be a dictionary, got {type(data)}"
            )

        required = ["access_token", "token_type"]
        missing = [k for k in required if k not in data]
        if missing:
            raise SpotifyTokenError(f"Token missing required fields: {missing}")

        expires_at = data.get("expires_at")
        if expires_at is None:
            expires_in = data.get("expires_in", 3600)
            expires_at = clock() + expires_in

        return cls(
            access_token=data["access_token"],
            token_type=data["token_type"],
            expires_at=float(expires_at),
            refresh_token=data.get("refresh_token"),
            scopes=SpotifyScope.parse(data.get("scope")),
            clock=clock,
        )

    @classmethod
    def from_access_token(
        cls,
        access_token: str,
        expires_in: float = 3600,
        clock: Clock = time.time,
    ) -> "Token":
        """Wrap a bare access token string obtained outside this library."""
        return cls(
            access_token=access_token,
            token_type="Bearer",
            expires_at=clock() + expires_in,
            clock=clock,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage/transmission."""
        result = {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_at": self.expires_at,
        }
        if self.refresh_token:
            result["refresh_token"] = self.refresh_token
        if self.scopes:
            result["scope"] = " ".join(scope.value for scope in self.scopes)
        return result

    @property
    def is_expired(self) -> bool:
        """Check if the token has expired."""
        return self.expires_at <= self.clock()

    def expires_within(self, seconds: float) -> bool:
        """Whether the token expires in the next ``seconds`` seconds."""
        return self.expires_at <= self.clock() + seconds

    @property
    def expires_in_seconds(self) -> int:
        """Get seconds until expiration (negative if expired)."""
        return int(self.expires_at - self.clock())

    def has_scopes(self, *scopes: SpotifyScope) -> bool:
        """Whether every given scope was granted to this token."""
        return all(scope in self.scopes for scope in scopes)

    def validate(self) -> None:
        """
        Validate that the token is usable.

        Raises:
            SpotifyTokenExpiredError: If the token has expired.
            SpotifyTokenError: If the token is invalid.
        """
        if not self.access_token:
            raise SpotifyTokenError("Token has no access_token")
        if self.is_expired:
            raise SpotifyTokenExpiredError(
                f"Token expired {abs(self.expires_in_seconds)} seconds ago"
            )


@dataclass(frozen=True)
class TokenValidityResponse:
    """Outcome of a token validity check."""

    is_valid: bool
    exception: Optional[Exception] = None


def _error_description(response: requests.Response) -> str:
    """Pull the human readable error out of an accounts-service response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return response.text
    return body.get("error_description") or body.get("error") or response.text


def get_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[SpotifyScope] = (),
    state: Optional[str] = None,
    show_dialog: bool = False,
) -> str:
    """
    Build the URL a user visits to grant this application access.

    Args:
        client_id: Application client id.
        redirect_uri: Registered callback URL.
        scopes: Scopes to request.
        state: Optional state parameter for CSRF protection.
        show_dialog: Force the consent dialog even if already approved.

    Returns:
        The authorization URL.
    """
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
    }
    scope_string = " ".join(SpotifyScope(scope).value for scope in scopes)
    if scope_string:
        params["scope"] = scope_string
    if state:
        params["state"] = state
    if show_dialog:
        params["show_dialog"] = "true"
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


class SpotifyAuthManager:
    """
    Talks to the Spotify accounts service.

    This class is stateless regarding tokens: it turns codes and refresh
    tokens into new Token objects and leaves storing them to the caller.

    Example:
        auth_manager = SpotifyAuthManager(credentials)
        url = auth_manager.get_auth_url([SpotifyScope.USER_TOP_READ])
        token = auth_manager.exchange_code(code)
        token = auth_manager.refresh_token(token)
    """

    def __init__(
        self,
        credentials: SpotifyCredentials,
        timeout: float = 30,
        clock: Clock = time.time,
    ):
        """
        Initialize the auth manager.

        Args:
            credentials: Application credentials.
            timeout: Timeout in seconds for accounts-service requests.
            clock: Time source handed to the tokens it creates.
        """
        self._credentials = credentials
        self._timeout = timeout
        self._clock = clock

    @property
    def credentials(self) -> SpotifyCredentials:
        return self._credentials

    def get_auth_url(
        self,
        scopes: Iterable[SpotifyScope] = (),
        state: Optional[str] = None,
        show_dialog: bool = False,
    ) -> str:
        """
        Generate the Spotify authorization URL.

        Raises:
            SpotifyAuthError: If client id or redirect uri is missing.
        """
        if not self._credentials.client_id or not self._credentials.redirect_uri:
            raise SpotifyAuthError(
                "A client id and redirect uri are required to build an "
                "authorization URL"
            )
        url = get_authorization_url(
            self._credentials.client_id,
            self._credentials.redirect_uri,
            scopes,
            state=state,
            show_dialog=show_dialog,
        )
        logger.debug(f"Generated auth URL: {url[:50]}...")
        return url

    def exchange_code(self, code: str) -> Token:
        """
        Exchange an authorization code for tokens.

        Raises:
            SpotifyAuthError: If code or credentials are missing.
            SpotifyTokenError: If token exchange fails.
        """
        if not code:
            raise SpotifyAuthError("Authorization code is required")
        if not self._credentials.redirect_uri:
            raise SpotifyAuthError(
                "A redirect uri is required to exchange an authorization code"
            )

        token = self._request_token(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._credentials.redirect_uri,
            },
            action="Token exchange",
        )
        logger.info("Successfully exchanged code for token")
        return token

    def refresh_token(self, token: Token) -> Token:
        """
        Refresh a user token with its refresh token.

        Spotify may not return a new refresh token; the old one is kept
        so the token can be refreshed again later.

        Raises:
            SpotifyTokenError: If refresh fails or no refresh_token available.
        """
        if not token.refresh_token:
            raise SpotifyTokenError(
                "Cannot refresh: no refresh_token available"
            )

        new_token = self._request_token(
            {
                "grant_type": "refresh_token",
                "refresh_token": token.refresh_token,
            },
            action="Token refresh",
        )
        if not new_token.refresh_token:
            new_token.refresh_token = token.refresh_token
        logger.info("Successfully refreshed token")
        return new_token

    def request_client_credentials_token(self) -> Token:
        """
        Obtain an application token (client credentials grant).

        Raises:
            SpotifyTokenError: If the request fails.
        """
        token = self._request_token(
            {"grant_type": "client_credentials"},
            action="Client credentials request",
        )
        logger.info("Successfully obtained client credentials token")
        return token

    def _request_token(self, data: Dict[str, str], action: str) -> Token:
        if not self._credentials.has_client_secret:
            raise SpotifyTokenError(
                f"{action} failed: client id and client secret are required"
            )

        try:
            response = requests.post(
                TOKEN_URL,
                data=data,
                auth=(
                    self._credentials.client_id,
                    self._credentials.client_secret,
                ),
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{action} failed: {e}", exc_info=True)
            raise SpotifyTokenError(f"{action} failed: {e}") from e

        if response.status_code != 200:
            error_msg = _error_description(response)
            logger.error(f"{action} failed ({response.status_code}): {error_msg}")
            raise SpotifyTokenError(f"{action} failed: {error_msg}")

        try:
            token_data = response.json()
        except ValueError as e:
            raise SpotifyTokenError(
                f"{action} failed: response was not JSON"
            ) from e
        if not token_data:
            raise SpotifyTokenError(f"{action} failed: no token returned")

        return Token.from_dict(token_data, clock=self._clock)
