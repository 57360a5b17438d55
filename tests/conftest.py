"""
Pytest configuration and shared fixtures for spotikit tests.

Provides a controllable clock, tokens, a mocked requests session and
API handles wired to it, so no test touches the network.
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from spotikit.auth import Token
from spotikit.cache import InMemoryCacheBackend, SpotifyCache
from spotikit.client import SpotifyClientApi
from spotikit.config import SpotifyApiOptions
from spotikit.credentials import SpotifyCredentials
from spotikit.http_client import SpotifyHTTPClient
from spotikit.token_store import TokenStore


# =============================================================================
# Helpers
# =============================================================================

class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token(clock):
    """A user token valid for an hour."""
    return Token(
        access_token='test_access_token_12345',
        token_type='Bearer',
        expires_at=clock() + 3600,
        refresh_token='test_refresh_token_67890',
        clock=clock,
    )


@pytest.fixture
def expired_token(clock):
    return Token(
        access_token='expired_access_token',
        token_type='Bearer',
        expires_at=clock() - 100,
        refresh_token='test_refresh_token',
        clock=clock,
    )


@pytest.fixture
def sample_token_data():
    """Token payload as returned by the accounts service."""
    return {
        'access_token': 'test_access_token_12345',
        'token_type': 'Bearer',
        'expires_in': 3600,
        'refresh_token': 'test_refresh_token_67890',
        'scope': 'playlist-read-private playlist-modify-public',
    }


@pytest.fixture
def credentials():
    return SpotifyCredentials(
        client_id='test_client_id',
        client_secret='test_client_secret',
        redirect_uri='http://localhost:8888/callback',
    )


@pytest.fixture
def options():
    return SpotifyApiOptions(use_cache=False)


@pytest.fixture
def token_store(token):
    refresher = MagicMock(name='refresher')
    return TokenStore(token, refresher=refresher)


@pytest.fixture
def session():
    mock_session = MagicMock(name='session')
    mock_session.headers = {}
    return mock_session


@pytest.fixture
def http_client(token_store, options, session):
    return SpotifyHTTPClient(token_store, options, session=session)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix='test-worker')
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def api(token_store, credentials, options, session, executor):
    """A user API handle whose requests go to the mocked session."""
    handle = SpotifyClientApi(
        token_store,
        credentials=credentials,
        options=options,
        cache=SpotifyCache(InMemoryCacheBackend()),
        session=session,
        executor=executor,
    )
    yield handle
    handle.close()
