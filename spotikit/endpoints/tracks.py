"""Track endpoints."""

from typing import Iterable, List, Optional

from ..actions import SpotifyRestAction
from ..models import AudioFeatures, Track
from .base import SpotifyEndpoint


class TrackApi(SpotifyEndpoint[Track]):
    """Catalog information about tracks, plus their audio features."""

    base_path = "/tracks"
    resource_type = "track"
    model = Track

    def get_track(
        self, track: str, market: Optional[str] = None
    ) -> SpotifyRestAction[Optional[Track]]:
        return self.get_one(track, market=market)

    def get_tracks(
        self, tracks: Iterable[str], market: Optional[str] = None
    ) -> SpotifyRestAction[List[Optional[Track]]]:
        return self.get_several(tracks, "tracks", market=market)

    def get_audio_features(self, track: str) -> SpotifyRestAction[Optional[AudioFeatures]]:
        """Audio features of one track; None if it does not exist."""
        return self.get_one(
            track, path=f"/audio-features/{self._id(track)}", model=AudioFeatures
        )

    def get_several_audio_features(
        self, tracks: Iterable[str]
    ) -> SpotifyRestAction[List[Optional[AudioFeatures]]]:
        """Audio features for many tracks, in order; unknown IDs map to None."""
        return self.get_several(
            tracks, "audio_features", path="/audio-features", model=AudioFeatures
        )
