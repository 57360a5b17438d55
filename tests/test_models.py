"""
Tests for the Spotify response models.

Tests parsing of nested payloads, tolerance of unknown fields and
the parse helpers' error handling, without requiring API access.
"""

import pytest

from spotikit.exceptions import SpotifyParseError
from spotikit.models import (
    Album,
    Artist,
    AudioFeatures,
    CurrentlyPlayingContext,
    PagingObject,
    PlayerRepeatState,
    Playlist,
    RecommendationSeed,
    SearchType,
    SimpleAlbum,
    Track,
    parse_model,
    parse_model_list,
)


def _track(track_id="t1", album=None):
    data = {
        "id": track_id,
        "uri": f"spotify:track:{track_id}",
        "name": f"Track {track_id}",
        "duration_ms": 180000,
        "artists": [{"id": "a1", "name": "Artist 1"}],
    }
    if album is not None:
        data["album"] = album
    return data


class TestCatalogModels:
    """Test parsing of catalog objects."""

    def test_track_with_album(self):
        track = parse_model(Track, _track(album={"id": "al1", "name": "Album"}))
        assert isinstance(track.album, SimpleAlbum)
        assert track.album.name == "Album"
        assert track.artists[0].name == "Artist 1"

    def test_unknown_fields_are_ignored(self):
        artist = parse_model(Artist, {"id": "a1", "name": "X", "brand_new_field": 1})
        assert artist.name == "X"
        assert not hasattr(artist, "brand_new_field")

    def test_album_embeds_track_page(self):
        album = parse_model(Album, {
            "id": "al1",
            "name": "Album",
            "tracks": {
                "href": "https://api.spotify.com/v1/albums/al1/tracks",
                "items": [_track("t1"), _track("t2")],
                "limit": 2,
                "next": "https://api.spotify.com/v1/albums/al1/tracks?offset=2",
                "offset": 0,
                "total": 3,
            },
        })
        assert isinstance(album.tracks, PagingObject)
        assert [t.id for t in album.tracks.items] == ["t1", "t2"]
        assert album.tracks.total == 3

    def test_audio_features_as_dict_drops_missing(self):
        features = parse_model(AudioFeatures, {"id": "t1", "tempo": 120.5})
        assert features.as_dict() == {"id": "t1", "tempo": 120.5}


class TestUserModels:
    """Test parsing of playlist and player objects."""

    def test_playlist_with_null_track(self):
        playlist = parse_model(Playlist, {
            "id": "p1",
            "name": "Mix",
            "owner": {"id": "u1", "display_name": "User"},
            "tracks": {"items": [{"track": None}, {"track": _track()}], "total": 2},
        })
        assert playlist.tracks.items[0].track is None
        assert playlist.tracks.items[1].track.id == "t1"

    def test_repeat_state_enum(self):
        context = parse_model(CurrentlyPlayingContext, {
            "is_playing": True,
            "repeat_state": "context",
            "device": {"id": "d1", "name": "Phone", "type": "Smartphone"},
        })
        assert context.repeat_state is PlayerRepeatState.CONTEXT
        assert context.device.name == "Phone"

    def test_recommendation_seed_aliases(self):
        seed = parse_model(RecommendationSeed, {
            "id": "pop", "type": "GENRE", "initialPoolSize": 250,
            "afterFilteringSize": 100, "afterRelinkingSize": 99,
        })
        assert seed.initial_pool_size == 250
        assert seed.after_relinking_size == 99

    def test_search_type_container_key(self):
        assert SearchType.ARTIST.container_key == "artists"
        assert SearchType("track") is SearchType.TRACK


class TestParseHelpers:
    """Test parse_model and parse_model_list."""

    def test_invalid_payload_raises_parse_error(self):
        with pytest.raises(SpotifyParseError, match="Track"):
            parse_model(Track, {"id": "t1", "duration_ms": "not a number"})

    def test_list_keeps_null_entries(self):
        tracks = parse_model_list(Track, {"tracks": [_track("t1"), None]}, "tracks")
        assert tracks[0].id == "t1"
        assert tracks[1] is None

    def test_list_missing_key(self):
        with pytest.raises(SpotifyParseError, match="tracks"):
            parse_model_list(Track, {"items": []}, "tracks")

    def test_list_requires_array(self):
        with pytest.raises(SpotifyParseError):
            parse_model_list(Track, {"id": "t1"})
