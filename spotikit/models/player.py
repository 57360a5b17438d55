"""Player models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from .base import SpotifyModel
from .tracks import Track


class PlayerRepeatState(str, Enum):
    TRACK = "track"
    CONTEXT = "context"
    OFF = "off"


class Device(SpotifyModel):
    id: Optional[str] = None
    is_active: bool = False
    is_private_session: bool = False
    is_restricted: bool = False
    name: str = ""
    type: str = ""
    volume_percent: Optional[int] = None


class PlaybackContext(SpotifyModel):
    type: Optional[str] = None
    href: Optional[str] = None
    uri: Optional[str] = None
    external_urls: Dict[str, str] = Field(default_factory=dict)


class CurrentlyPlayingObject(SpotifyModel):
    """What is playing for the current user, without device details."""

    context: Optional[PlaybackContext] = None
    timestamp: Optional[int] = None
    progress_ms: Optional[int] = None
    is_playing: bool = False
    item: Optional[Track] = None
    currently_playing_type: Optional[str] = None
    actions: Dict[str, Any] = Field(default_factory=dict)


class CurrentlyPlayingContext(CurrentlyPlayingObject):
    """Full playback state, as returned by /me/player."""

    device: Optional[Device] = None
    repeat_state: Optional[PlayerRepeatState] = None
    shuffle_state: Optional[bool] = None


class PlayHistory(SpotifyModel):
    track: Track
    played_at: Optional[str] = None
    context: Optional[PlaybackContext] = None
