"""
Spotify URL and URI parser utility.

Extracts resource IDs from Spotify web URLs, app URIs and bare IDs,
and encodes IDs for use in request paths.
"""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

# Spotify resource ID format: 22 base62 characters
SPOTIFY_ID_PATTERN = re.compile(r"^[a-zA-Z0-9]{22}$")

RESOURCE_TYPES = ("album", "artist", "playlist", "track", "user", "show", "episode")

_URL_PATTERN = re.compile(
    r"^(?:https?://)?open\.spotify\.com/(?:intl-[a-z]{2}/)?"
    r"(?P<type>[a-z]+)/(?P<id>[^/?#]+)(?:[?#].*)?$"
)
_URI_PATTERN = re.compile(r"^spotify:(?P<type>[a-z]+):(?P<id>[^:]+)$")
# Legacy playlist URIs: spotify:user:{user}:playlist:{id}
_USER_PLAYLIST_URI_PATTERN = re.compile(
    r"^spotify:user:[^:]+:playlist:(?P<id>[a-zA-Z0-9]{22})$"
)


def parse_spotify_id(
    input_string: str, resource_type: Optional[str] = None
) -> Optional[str]:
    """
    Extract a Spotify resource ID from a URL, URI, or bare ID.

    Supports these formats:
        - https://open.spotify.com/track/6rqhFgbbKwnb9MLmUQDhG6
        - https://open.spotify.com/track/6rqhFgbbKwnb9MLmUQDhG6?si=abc123
        - open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
        - spotify:artist:0TnOYISbd1XYRBk9myaseg
        - spotify:user:someone:playlist:37i9dQZF1DXcBWIGoYBM5M
        - 6rqhFgbbKwnb9MLmUQDhG6  (bare ID)

    Args:
        input_string: The URL, URI, or ID to parse.
        resource_type: If given (e.g. ``"track"``), URLs and URIs of any
            other type are rejected.

    Returns:
        The resource ID, or None if the input does not match any known
        format.
    """
    if not input_string or not isinstance(input_string, str):
        return None

    cleaned = input_string.strip()
    if not cleaned:
        return None

    if SPOTIFY_ID_PATTERN.match(cleaned):
        return cleaned

    match = _USER_PLAYLIST_URI_PATTERN.match(cleaned)
    if match:
        if resource_type not in (None, "playlist"):
            return None
        return match.group("id")

    for pattern in (_URI_PATTERN, _URL_PATTERN):
        match = pattern.match(cleaned)
        if match:
            if resource_type is not None and match.group("type") != resource_type:
                logger.debug(
                    f"Expected a {resource_type} reference, got {cleaned!r}"
                )
                return None
            return match.group("id")

    # User IDs are free-form; anything else is not a recognizable reference
    if resource_type == "user" and ":" not in cleaned and "/" not in cleaned:
        return cleaned

    logger.debug(f"Could not parse Spotify ID from: {cleaned!r}")
    return None


def require_spotify_id(input_string: str, resource_type: Optional[str] = None) -> str:
    """
    Like parse_spotify_id, but raises ValueError when nothing matches.
    """
    resource_id = parse_spotify_id(input_string, resource_type)
    if resource_id is None:
        kind = resource_type or "Spotify"
        raise ValueError(f"Not a valid {kind} ID, URI or URL: {input_string!r}")
    return resource_id


def encode_id(input_string: str, resource_type: Optional[str] = None) -> str:
    """Parse an ID and percent-encode it for use in a request path."""
    return quote(require_spotify_id(input_string, resource_type), safe="")


def join_ids(
    inputs: Iterable[str], resource_type: Optional[str] = None
) -> str:
    """Comma-join parsed IDs for the ``ids`` query parameter."""
    return ",".join(require_spotify_id(i, resource_type) for i in inputs)


def to_uri(resource_type: str, input_string: str) -> str:
    """Build a ``spotify:{type}:{id}`` URI from any supported reference."""
    if resource_type not in RESOURCE_TYPES:
        raise ValueError(f"Unknown resource type: {resource_type}")
    return f"spotify:{resource_type}:{require_spotify_id(input_string, resource_type)}"


def to_uris(resource_type: str, inputs: Iterable[str]) -> List[str]:
    return [to_uri(resource_type, i) for i in inputs]
