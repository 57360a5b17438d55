"""Tests for Spotify URL/URI parsing."""

import pytest

from spotikit.uris import (
    encode_id,
    join_ids,
    parse_spotify_id,
    require_spotify_id,
    to_uri,
)

TRACK_ID = "6rqhFgbbKwnb9MLmUQDhG6"
PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


class TestParseSpotifyId:
    """Tests for parse_spotify_id()."""

    @pytest.mark.parametrize("reference", [
        TRACK_ID,
        f"spotify:track:{TRACK_ID}",
        f"https://open.spotify.com/track/{TRACK_ID}",
        f"https://open.spotify.com/track/{TRACK_ID}?si=abc123",
        f"open.spotify.com/track/{TRACK_ID}",
        f"https://open.spotify.com/intl-de/track/{TRACK_ID}",
        f"  {TRACK_ID}  ",
    ])
    def test_track_formats(self, reference):
        assert parse_spotify_id(reference, "track") == TRACK_ID

    def test_legacy_user_playlist_uri(self):
        uri = f"spotify:user:someone:playlist:{PLAYLIST_ID}"
        assert parse_spotify_id(uri, "playlist") == PLAYLIST_ID

    def test_wrong_type_rejected(self):
        assert parse_spotify_id(f"spotify:album:{TRACK_ID}", "track") is None

    def test_free_form_user_id(self):
        assert parse_spotify_id("wizzler", "user") == "wizzler"

    @pytest.mark.parametrize("reference", [None, "", "   ", "not an id", "spotify:"])
    def test_invalid(self, reference):
        assert parse_spotify_id(reference) is None


class TestHelpers:
    """Tests for the encoding helpers."""

    def test_require_raises(self):
        with pytest.raises(ValueError, match="track"):
            require_spotify_id("garbage", "track")

    def test_encode_id_quotes(self):
        assert encode_id("user name#1", "user") == "user%20name%231"

    def test_join_ids(self):
        joined = join_ids([TRACK_ID, f"spotify:track:{TRACK_ID}"], "track")
        assert joined == f"{TRACK_ID},{TRACK_ID}"

    def test_to_uri(self):
        assert to_uri("track", f"https://open.spotify.com/track/{TRACK_ID}") == (
            f"spotify:track:{TRACK_ID}"
        )

    def test_to_uri_unknown_type(self):
        with pytest.raises(ValueError):
            to_uri("podcast", TRACK_ID)
