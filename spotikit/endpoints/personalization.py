"""The current user's top artists and tracks."""

from enum import Enum
from typing import Optional, Union

from ..actions import SpotifyRestActionPaging
from ..models import Artist, PagingObject, Track
from .base import SpotifyEndpoint, build_params


class TimeRange(str, Enum):
    """How far back affinities are computed."""

    LONG_TERM = "long_term"
    MEDIUM_TERM = "medium_term"
    SHORT_TERM = "short_term"


class ClientPersonalizationApi(SpotifyEndpoint[Artist]):
    base_path = "/me/top"

    def get_top_artists(
        self,
        time_range: Optional[Union[TimeRange, str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[Artist]]:
        params = build_params(
            time_range=TimeRange(time_range) if time_range else None,
            limit=limit,
            offset=offset,
        )
        return self.get_page(f"{self.base_path}/artists", Artist, params)

    def get_top_tracks(
        self,
        time_range: Optional[Union[TimeRange, str]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[Track]]:
        params = build_params(
            time_range=TimeRange(time_range) if time_range else None,
            limit=limit,
            offset=offset,
        )
        return self.get_page(f"{self.base_path}/tracks", Track, params)
