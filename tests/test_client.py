"""
Tests for the SpotifyApi handles.

Tests cover endpoint wiring, token validity checks, the cache switch
and the handle lifecycle.
"""

import json
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from spotikit.auth import Token
from spotikit.cache import InMemoryCacheBackend, SpotifyCache
from spotikit.client import SpotifyAppApi, SpotifyClientApi
from spotikit.config import SpotifyApiOptions
from spotikit.endpoints import ClientPlaylistApi, PlaylistApi
from spotikit.exceptions import SpotifyForbiddenError, SpotifyTokenExpiredError
from spotikit.token_store import TokenStore


def _mock_response(status_code=200, json_data=None):
    """Create a mock response object."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.headers = {}
    resp.text = json.dumps(json_data) if json_data is not None else ""
    return resp


@pytest.fixture
def app_api(token_store, session):
    """An application handle that owns its worker pool."""
    handle = SpotifyAppApi(
        token_store, options=SpotifyApiOptions(use_cache=False), session=session
    )
    yield handle
    handle.close()


class TestEndpointGroups:
    """Test which endpoint groups each handle exposes."""

    def test_app_api_has_public_groups_only(self, app_api):
        assert type(app_api.playlists) is PlaylistApi
        assert not hasattr(app_api, "library")
        assert not hasattr(app_api, "player")
        assert not hasattr(app_api, "personalization")

    def test_client_api_has_user_groups(self, api):
        assert isinstance(api.playlists, ClientPlaylistApi)
        for group in ("library", "player", "personalization", "following", "users"):
            assert getattr(api, group).api is api

    def test_groups_share_http_client(self, api):
        assert api.artists.http is api.http_client
        assert api.player.http is api.http_client

    def test_get_user_id(self, api, session):
        session.request.return_value = _mock_response(json_data={"id": "wizzler"})
        assert api.get_user_id() == "wizzler"


class TestTokenValidity:
    """Test SpotifyApi.is_token_valid and refresh_token."""

    def test_valid_token(self, api, session):
        session.request.return_value = _mock_response(json_data={"genres": ["rock"]})

        validity = api.is_token_valid()

        assert validity.is_valid is True
        assert validity.exception is None
        url = session.request.call_args.args[1]
        assert url.endswith("/recommendations/available-genre-seeds")

    def test_rejected_token(self, api, session):
        session.request.return_value = _mock_response(
            403, {"error": {"status": 403, "message": "Forbidden"}}
        )

        validity = api.is_token_valid()

        assert validity.is_valid is False
        assert isinstance(validity.exception, SpotifyForbiddenError)

    def test_expired_token_skips_request(self, expired_token, session):
        store = TokenStore(expired_token, refresher=None)
        with SpotifyAppApi(store, session=session) as handle:
            validity = handle.is_token_valid()

        assert validity.is_valid is False
        assert isinstance(validity.exception, SpotifyTokenExpiredError)
        session.request.assert_not_called()

    def test_without_test_request(self, api, session):
        assert api.is_token_valid(make_test_request=False).is_valid is True
        session.request.assert_not_called()

    def test_refresh_token(self, api, token_store, clock):
        fresh = Token(
            access_token="fresh", token_type="Bearer",
            expires_at=clock() + 3600, clock=clock,
        )
        token_store._refresher.return_value = fresh

        assert api.refresh_token() is fresh
        assert api.token is fresh


class TestCacheSwitch:
    """Test the use_cache property."""

    def test_disabling_clears_cache(self, api):
        api.use_cache = True
        api.cache.store("https://example.test/a", "{}", {"ETag": "abc"})
        assert api.cache.lookup("https://example.test/a") is not None

        api.use_cache = False

        assert api.options.use_cache is False
        assert api.cache.lookup("https://example.test/a") is None


class TestSharedCache:
    """Test handles for different users sharing one cache."""

    def test_private_responses_not_shared(self, token, executor):
        cache = SpotifyCache(InMemoryCacheBackend())
        handles, sessions = [], []
        for user_id in ("alice", "bob"):
            user_session = MagicMock()
            user_session.headers = {}
            resp = _mock_response(json_data={"id": user_id})
            resp.headers = {"Cache-Control": "private, max-age=3600"}
            user_session.request.return_value = resp
            sessions.append(user_session)
            handles.append(SpotifyClientApi(
                TokenStore(token, refresher=None),
                options=SpotifyApiOptions(use_cache=True),
                cache=cache,
                session=user_session,
                executor=executor,
            ))
        alice, bob = handles

        assert alice.get_user_id() == "alice"
        assert bob.get_user_id() == "bob"
        sessions[1].request.assert_called_once()
        assert cache.lookup("https://api.spotify.com/v1/me") is None
        for handle in handles:
            handle.close()


class TestLifecycle:
    """Test close() and the context manager."""

    def test_close_shuts_down_owned_pool(self, app_api, session):
        app_api.close()

        session.close.assert_called_once()
        with pytest.raises(RuntimeError):
            app_api.executor.submit(lambda: None)

    def test_close_is_idempotent(self, app_api, session):
        app_api.close()
        app_api.close()
        session.close.assert_called_once()

    def test_close_keeps_shared_pool(self, token_store, session):
        pool = ThreadPoolExecutor(max_workers=1)
        try:
            with SpotifyClientApi(token_store, session=session, executor=pool):
                pass
            assert pool.submit(lambda: 42).result() == 42
        finally:
            pool.shutdown()
