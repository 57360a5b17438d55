"""
Spotify client exceptions.

Provides a clean exception hierarchy for Spotify Web API operations.
HTTP failures are classified by status code so callers can react to
the ones they care about (missing resources, rate limits, auth).
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify-related errors."""
    pass


class SpotifyAuthError(SpotifyError):
    """Raised when authentication/authorization fails."""
    pass


class SpotifyTokenError(SpotifyAuthError):
    """Raised when token operations fail."""
    pass


class SpotifyTokenExpiredError(SpotifyTokenError):
    """Raised when a token has expired and cannot be refreshed."""
    pass


class SpotifyAPIError(SpotifyError):
    """
    Raised when a Spotify API call fails with an HTTP error status.

    Attributes:
        status_code: HTTP status of the failed response, if any.
        reason: Spotify's machine-readable reason, if one was sent.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class SpotifyBadRequestError(SpotifyAPIError):
    """
    Raised for 400 and 404 responses.

    These are "soft" failures: SpotifyRestAction.catching() turns them
    into an absent result.
    """
    pass


class SpotifyNotFoundError(SpotifyBadRequestError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, status_code=404, reason=reason)


class SpotifyForbiddenError(SpotifyAPIError):
    """Raised when the token lacks permission for a request (403)."""

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message, status_code=403, reason=reason)


class SpotifyRateLimitError(SpotifyAPIError):
    """Raised when rate limited by Spotify API."""

    def __init__(self, message: str, retry_after: int = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class SpotifyServerError(SpotifyAPIError):
    """Raised when Spotify answers with a 5xx status."""
    pass


class SpotifyNetworkError(SpotifyError):
    """Raised when the request never got a response (DNS, timeout, reset)."""
    pass


class SpotifyParseError(SpotifyError):
    """Raised when a response body cannot be decoded into the expected model."""
    pass


class SpotifyCancelledError(SpotifyError):
    """Raised when a queued action is cancelled before it starts."""
    pass
