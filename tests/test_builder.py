"""
Tests for SpotifyApiBuilder.

The accounts service is mocked by patching requests.post in the auth
module; API requests go to a mocked session.
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from spotikit.builder import SpotifyApiBuilder
from spotikit.client import SpotifyAppApi, SpotifyClientApi
from spotikit.exceptions import SpotifyAuthError, SpotifyTokenError


def _mock_token_response(token_data):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = token_data
    return resp


def _mock_api_response(status_code, text):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 400
    resp.headers = {}
    resp.text = text
    return resp


@pytest.fixture
def builder(credentials, session, clock):
    return (
        SpotifyApiBuilder()
        .clock(clock)
        .credentials(credentials)
        .session(session)
    )


class TestBuildApp:
    """Tests for build_app()."""

    @patch("spotikit.auth.requests.post")
    def test_requests_client_credentials_token(self, mock_post, builder, sample_token_data):
        mock_post.return_value = _mock_token_response(sample_token_data)

        with builder.build_app() as api:
            assert isinstance(api, SpotifyAppApi)
            assert api.token.access_token == "test_access_token_12345"
            assert api.token_store.can_refresh is True

        assert mock_post.call_args.kwargs["data"] == {"grant_type": "client_credentials"}

    @patch("spotikit.auth.requests.post")
    def test_supplied_token_skips_request(self, mock_post, builder, token):
        with builder.token(token).build_app() as api:
            assert api.token is token
        mock_post.assert_not_called()

    def test_missing_secret(self, session):
        builder = SpotifyApiBuilder("client_only").session(session)
        with pytest.raises(SpotifyTokenError):
            builder.build_app()

    def test_options_are_copied(self, builder, token):
        builder.token(token).with_options(use_cache=False)
        with builder.build_app() as api:
            builder.with_options(use_cache=True)
            assert api.options.use_cache is False


class TestBuildClient:
    """Tests for build_client()."""

    @patch("spotikit.auth.requests.post")
    def test_from_authorization_code(self, mock_post, builder, sample_token_data):
        mock_post.return_value = _mock_token_response(sample_token_data)

        with builder.authorization_code("auth_code_123").build_client() as api:
            assert isinstance(api, SpotifyClientApi)
            assert api.token_store.can_refresh is True

        data = mock_post.call_args.kwargs["data"]
        assert data["grant_type"] == "authorization_code"
        assert data["code"] == "auth_code_123"
        assert data["redirect_uri"] == "http://localhost:8888/callback"

    @patch("spotikit.auth.requests.post")
    def test_from_refresh_token_string(self, mock_post, builder, sample_token_data):
        mock_post.return_value = _mock_token_response(sample_token_data)

        with builder.refresh_token_string("stored_refresh").build_client() as api:
            assert api.token.access_token == "test_access_token_12345"

        data = mock_post.call_args.kwargs["data"]
        assert data == {"grant_type": "refresh_token", "refresh_token": "stored_refresh"}

    def test_from_token_string_cannot_refresh(self, builder):
        with builder.token_string("bare_token").build_client() as api:
            assert api.token.access_token == "bare_token"
            assert api.token_store.can_refresh is False

    def test_token_string_uses_clock_set_afterwards(self, credentials, session, clock):
        builder = (
            SpotifyApiBuilder()
            .credentials(credentials)
            .token_string("bare_token")
            .clock(clock)
            .session(session)
        )

        with builder.build_client() as api:
            assert api.token.clock is clock
            assert api.token.expires_at == clock() + 3600

    def test_later_token_replaces_token_string(self, builder, token):
        with builder.token_string("bare_token").token(token).build_client() as api:
            assert api.token is token

    def test_without_authorization_source(self, builder):
        with pytest.raises(SpotifyAuthError, match="authorization code"):
            builder.build_client()

    def test_token_validity_check_failure(self, builder, session):
        session.request.return_value = _mock_api_response(
            401, '{"error": {"status": 401, "message": "Invalid access token"}}'
        )
        builder.token_string("revoked").with_options(test_token_validity=True)

        with pytest.raises(SpotifyAuthError, match="not valid"):
            builder.build_client()
        session.close.assert_called_once()

    def test_token_validity_check_success(self, builder, session):
        session.request.return_value = _mock_api_response(200, '{"genres": []}')
        builder.token_string("good").with_options(test_token_validity=True)

        with builder.build_client() as api:
            assert api.token.access_token == "good"
        session.request.assert_called_once()


class TestAsyncBuild:
    """Tests for build_async() and suspend_build()."""

    def test_build_async_returns_future(self, builder, token, executor):
        future = builder.token(token).executor(executor).build_async(client=True)
        api = future.result(timeout=5)
        try:
            assert isinstance(api, SpotifyClientApi)
            assert api.executor is executor
        finally:
            api.close()

    def test_build_async_failure(self, builder, executor):
        future = builder.executor(executor).build_async(client=True)
        with pytest.raises(SpotifyAuthError):
            future.result(timeout=5)

    def test_suspend_build(self, builder, token, executor):
        async def build():
            return await builder.token(token).executor(executor).suspend_build()

        api = asyncio.run(build())
        try:
            assert isinstance(api, SpotifyAppApi)
        finally:
            api.close()


class TestAuthorizationUrl:
    """Tests for get_authorization_url()."""

    def test_url_uses_credentials(self, builder):
        url = builder.get_authorization_url(state="xyz")
        assert "client_id=test_client_id" in url
        assert "state=xyz" in url
