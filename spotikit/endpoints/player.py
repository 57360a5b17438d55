"""
Playback control for the current user.

Needs a user token with the ``user-read-playback-state`` /
``user-modify-playback-state`` scopes. Most control calls also need a
Premium account.
"""

import logging
from typing import Iterable, List, Optional, Union

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..models import (
    CurrentlyPlayingContext,
    CurrentlyPlayingObject,
    CursorBasedPagingObject,
    Device,
    PlayerRepeatState,
    PlayHistory,
    parse_model,
)
from ..uris import to_uris
from .base import SpotifyEndpoint, build_params

logger = logging.getLogger(__name__)


class ClientPlayerApi(SpotifyEndpoint[CurrentlyPlayingContext]):
    base_path = "/me/player"

    def _state(self, path: str, model) -> SpotifyRestAction:
        # 204 (nothing playing) gives an empty body
        def fetch():
            data = self.http.get(path)
            return parse_model(model, data) if data else None

        return self.to_action(fetch)

    def get_devices(self) -> SpotifyRestAction[List[Device]]:
        return self.get_list(f"{self.base_path}/devices", Device, "devices")

    def get_current_context(self) -> SpotifyRestAction[Optional[CurrentlyPlayingContext]]:
        """Full playback state; None when nothing is active."""
        return self._state(self.base_path, CurrentlyPlayingContext)

    def get_currently_playing(self) -> SpotifyRestAction[Optional[CurrentlyPlayingObject]]:
        return self._state(f"{self.base_path}/currently-playing", CurrentlyPlayingObject)

    def get_recently_played(
        self,
        limit: Optional[int] = None,
        before: Optional[int] = None,
        after: Optional[int] = None,
    ) -> SpotifyRestActionPaging[CursorBasedPagingObject[PlayHistory]]:
        """
        Recently played tracks, newest first.

        Raises:
            ValueError: If both ``before`` and ``after`` are given.
        """
        if before is not None and after is not None:
            raise ValueError("Only one of before/after may be given")
        params = build_params(limit=limit, before=before, after=after)
        return self.get_page(
            f"{self.base_path}/recently-played", PlayHistory, params, cursor_based=True
        )

    def start_playback(
        self,
        context_uri: Optional[str] = None,
        track_uris: Optional[Iterable[str]] = None,
        offset_position: Optional[int] = None,
        position_ms: Optional[int] = None,
        device_id: Optional[str] = None,
    ) -> SpotifyRestAction[None]:
        """
        Start or resume playback.

        Play either a context (album, artist, playlist URI) or an explicit
        list of tracks; with neither, resumes the current context.

        Raises:
            ValueError: If both a context and tracks are given.
        """
        if context_uri and track_uris:
            raise ValueError("Give either a context URI or track URIs, not both")
        body = {}
        if context_uri:
            body["context_uri"] = context_uri
        if track_uris:
            body["uris"] = to_uris("track", track_uris)
        if offset_position is not None:
            body["offset"] = {"position": offset_position}
        if position_ms is not None:
            body["position_ms"] = position_ms
        return self.send(
            "PUT",
            f"{self.base_path}/play",
            params=build_params(device_id=device_id),
            json=body or None,
        )

    def resume(self, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        return self.start_playback(device_id=device_id)

    def pause(self, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        return self.send(
            "PUT", f"{self.base_path}/pause", params=build_params(device_id=device_id)
        )

    def seek(self, position_ms: int, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        if position_ms < 0:
            raise ValueError("Position must not be negative")
        params = build_params(position_ms=position_ms, device_id=device_id)
        return self.send("PUT", f"{self.base_path}/seek", params=params)

    def set_repeat_mode(
        self, state: Union[PlayerRepeatState, str], device_id: Optional[str] = None
    ) -> SpotifyRestAction[None]:
        params = build_params(state=PlayerRepeatState(state), device_id=device_id)
        return self.send("PUT", f"{self.base_path}/repeat", params=params)

    def set_volume(self, volume_percent: int, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        if not 0 <= volume_percent <= 100:
            raise ValueError("Volume must be between 0 and 100")
        params = build_params(volume_percent=volume_percent, device_id=device_id)
        return self.send("PUT", f"{self.base_path}/volume", params=params)

    def toggle_shuffle(self, shuffle: bool = True, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        params = build_params(state=shuffle, device_id=device_id)
        return self.send("PUT", f"{self.base_path}/shuffle", params=params)

    def skip_forward(self, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        return self.send(
            "POST", f"{self.base_path}/next", params=build_params(device_id=device_id)
        )

    def skip_behind(self, device_id: Optional[str] = None) -> SpotifyRestAction[None]:
        return self.send(
            "POST", f"{self.base_path}/previous", params=build_params(device_id=device_id)
        )

    def transfer_playback(self, device_id: str, play: Optional[bool] = None) -> SpotifyRestAction[None]:
        """Move playback to ``device_id``; ``play`` forces playing or paused."""
        body = {"device_ids": [device_id]}
        if play is not None:
            body["play"] = play
        logger.debug(f"Transferring playback to {device_id}")
        return self.send("PUT", self.base_path, json=body)
