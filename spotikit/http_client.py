"""
Authenticated HTTP client for the Spotify Web API.

Wraps requests.Session with bearer-token attachment, a single
refresh-and-retry on 401, error classification and optional response
caching. Retrying rate-limited or failed requests is opt-in.
"""

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .cache import SpotifyCache
from .config import SpotifyApiOptions
from .exceptions import (
    SpotifyAPIError,
    SpotifyAuthError,
    SpotifyBadRequestError,
    SpotifyForbiddenError,
    SpotifyNetworkError,
    SpotifyNotFoundError,
    SpotifyParseError,
    SpotifyRateLimitError,
    SpotifyServerError,
)
from .token_store import TokenStore

logger = logging.getLogger(__name__)

BASE_URL = "https://api.spotify.com/v1"
MAX_RETRIES = 4
BASE_DELAY = 2  # seconds
MAX_DELAY = 16  # seconds
DEFAULT_RETRY_AFTER = 1  # seconds


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay, capped at MAX_DELAY."""
    return min(BASE_DELAY * (2 ** attempt), MAX_DELAY)


def _retry_after(response: requests.Response, default: int) -> int:
    try:
        return int(response.headers.get("Retry-After", default))
    except (TypeError, ValueError):
        return default


def _error_details(response: requests.Response) -> Tuple[str, Optional[str]]:
    """Return (message, reason) from a Spotify error body."""
    try:
        body = json.loads(response.text)
    except (TypeError, ValueError):
        return response.text or f"HTTP {response.status_code}", None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message") or response.text, error.get("reason")
    if isinstance(error, str):
        return body.get("error_description") or error, None
    return response.text, None


def decode_json(body: str, url: str) -> Any:
    """Decode a response body, raising SpotifyParseError on malformed JSON."""
    try:
        return json.loads(body)
    except ValueError as e:
        raise SpotifyParseError(f"Malformed JSON from {url}: {e}") from e


class SpotifyHTTPClient:
    """
    HTTP client for Spotify Web API requests.

    Asks the token store for a valid token before every request, refreshes
    once on a 401 and replays the request. A second 401 is fatal.

    Args:
        token_store: Token store shared by the owning API instance.
        options: Client options (timeouts, cache and retry switches).
        cache: Response cache used when ``options.use_cache`` is set.
        session: Optional preconfigured requests.Session.
    """

    def __init__(
        self,
        token_store: TokenStore,
        options: Optional[SpotifyApiOptions] = None,
        cache: Optional[SpotifyCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self._token_store = token_store
        self._options = options or SpotifyApiOptions()
        self._cache = cache
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    @property
    def cache(self) -> Optional[SpotifyCache]:
        return self._cache

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    # -----------------------------------------------------------------
    # Public HTTP methods
    # -----------------------------------------------------------------

    def get(self, path: str, params: Optional[Dict] = None) -> Any:
        """Send a GET request."""
        return self._request("GET", path, params=params)

    def post(
        self, path: str, json: Any = None, params: Optional[Dict] = None
    ) -> Any:
        """Send a POST request."""
        return self._request("POST", path, params=params, json=json)

    def put(
        self,
        path: str,
        json: Any = None,
        params: Optional[Dict] = None,
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Any:
        """Send a PUT request. ``data`` sends a raw body (e.g. an image)."""
        return self._request(
            "PUT", path, params=params, json=json, data=data,
            content_type=content_type,
        )

    def delete(
        self, path: str, json: Any = None, params: Optional[Dict] = None
    ) -> Any:
        """Send a DELETE request."""
        return self._request("DELETE", path, params=params, json=json)

    def get_url(self, url: str) -> Any:
        """GET an absolute URL, e.g. the ``next`` link of a page."""
        return self._request_url("GET", url)

    # -----------------------------------------------------------------
    # Internal request handling
    # -----------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Make a request to a relative API path."""
        return self._request_url(method, f"{BASE_URL}{path}", **kwargs)

    def _cache_enabled(self, method: str) -> bool:
        return (
            method == "GET"
            and self._cache is not None
            and self._options.use_cache
        )

    def _request_url(
        self,
        method: str,
        url: str,
        params: Optional[Dict] = None,
        json: Any = None,
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Any:
        """
        Execute an HTTP request with refresh and error handling.

        On 401, refreshes the token once and retries. A 202 to a GET is
        retried once. 429/5xx/network failures are retried only when the
        matching option is enabled.
        """
        full_url = requests.Request(method, url, params=params).prepare().url
        cached = None
        if self._cache_enabled(method):
            cached = self._cache.lookup(full_url)
            if cached is not None and self._cache.is_fresh(cached):
                logger.debug(f"Cache hit for {full_url}")
                return decode_json(cached.data, full_url)

        token_refreshed = False
        accepted_retried = False
        attempt = 0

        while True:
            token = self._token_store.current_token()
            headers = {"Authorization": f"Bearer {token.access_token}"}
            if content_type:
                headers["Content-Type"] = content_type
            if cached is not None and cached.etag:
                headers["If-None-Match"] = cached.etag

            logger.debug("%s %s", method, full_url)
            try:
                response = self._session.request(
                    method, url, params=params, json=json, data=data,
                    headers=headers, timeout=self._options.request_timeout,
                )
            except (ConnectionError, Timeout, RequestException) as e:
                if self._options.retry_on_server_error and attempt < MAX_RETRIES:
                    delay = _calculate_backoff_delay(attempt)
                    logger.warning(
                        "Network error, retry %d/%d in %ss: %s",
                        attempt + 1, MAX_RETRIES + 1, delay, e,
                    )
                    time.sleep(delay)
                    attempt += 1
                    continue
                raise SpotifyNetworkError(
                    f"Network error calling {full_url}: {e}"
                ) from e

            status = response.status_code

            # --- Not modified: serve the revalidated cache entry ---
            if status == 304 and cached is not None:
                renewed = self._cache.revalidated(
                    full_url, cached, response.headers
                )
                return decode_json(renewed.data, full_url)

            # --- Accepted: Spotify is still preparing the data ---
            if status == 202 and method == "GET" and not accepted_retried:
                logger.debug("202 received, retrying once")
                accepted_retried = True
                continue

            # --- Success ---
            if response.ok:
                body = response.text
                if status == 204 or not body:
                    return None
                result = decode_json(body, full_url)
                if self._cache_enabled(method):
                    self._cache.store(full_url, body, response.headers)
                return result

            # --- 401 Unauthorized: refresh once ---
            if status == 401:
                if not token_refreshed and self._token_store.can_refresh:
                    logger.info("401 received, attempting token refresh")
                    self._token_store.refresh(stale=token)
                    token_refreshed = True
                    continue
                message, _ = _error_details(response)
                raise SpotifyAuthError(f"Token expired or invalid: {message}")

            # --- 429 Rate Limited ---
            if status == 429:
                retry_after = _retry_after(response, DEFAULT_RETRY_AFTER)
                if self._options.retry_when_rate_limited and attempt < MAX_RETRIES:
                    delay = max(retry_after, _calculate_backoff_delay(attempt))
                    logger.warning(
                        "Rate limited (429), retry %d/%d in %ss",
                        attempt + 1, MAX_RETRIES + 1, delay,
                    )
                    time.sleep(delay)
                    attempt += 1
                    continue
                raise SpotifyRateLimitError(
                    f"Rate limited calling {full_url}", retry_after=retry_after
                )

            # --- 5xx Server Error ---
            if status >= 500:
                if self._options.retry_on_server_error and attempt < MAX_RETRIES:
                    delay = _calculate_backoff_delay(attempt)
                    logger.warning(
                        "Server error %d, retry %d/%d in %ss",
                        status, attempt + 1, MAX_RETRIES + 1, delay,
                    )
                    time.sleep(delay)
                    attempt += 1
                    continue
                message, reason = _error_details(response)
                raise SpotifyServerError(
                    f"Server error {status}: {message}",
                    status_code=status, reason=reason,
                )

            raise self._client_error(response, full_url)

    @staticmethod
    def _client_error(response: requests.Response, url: str) -> SpotifyAPIError:
        """Map a 4xx response (other than 401/429) to an exception."""
        status = response.status_code
        message, reason = _error_details(response)
        if status == 404:
            return SpotifyNotFoundError(
                f"Resource not found: {url} ({message})", reason=reason
            )
        if status == 400:
            return SpotifyBadRequestError(
                f"Bad request: {message}", status_code=400, reason=reason
            )
        if status == 403:
            return SpotifyForbiddenError(f"Forbidden: {message}", reason=reason)
        return SpotifyAPIError(
            f"API error {status}: {message}", status_code=status, reason=reason
        )
