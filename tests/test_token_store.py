"""Tests for TokenStore."""

import threading
import time
from unittest.mock import MagicMock

import pytest

from spotikit.auth import Token
from spotikit.exceptions import (
    SpotifyAPIError,
    SpotifyAuthError,
    SpotifyTokenError,
    SpotifyTokenExpiredError,
)
from spotikit.token_store import TokenState, TokenStore


def _token(clock, name='fresh', lifetime=3600):
    return Token(
        access_token=name,
        token_type='Bearer',
        expires_at=clock() + lifetime,
        refresh_token='refresh',
        clock=clock,
    )


class TestTokenState:
    """Tests for state reporting."""

    def test_valid_token(self, token):
        store = TokenStore(token)
        assert store.state is TokenState.VALID
        assert store.needs_refresh is False

    def test_expired_token(self, expired_token):
        store = TokenStore(expired_token)
        assert store.state is TokenState.NEEDS_REFRESH

    def test_leeway_marks_token_expiring_soon(self, clock):
        store = TokenStore(_token(clock, lifetime=30), leeway=60)
        assert store.needs_refresh is True

    def test_can_refresh_requires_refresher_and_switch(self, token):
        assert TokenStore(token).can_refresh is False
        assert TokenStore(token, refresher=MagicMock()).can_refresh is True
        assert TokenStore(
            token, refresher=MagicMock(), automatic_refresh=False
        ).can_refresh is False


class TestCurrentToken:
    """Tests for current_token()."""

    def test_returns_valid_token_without_refresh(self, token):
        refresher = MagicMock()
        store = TokenStore(token, refresher=refresher)

        assert store.current_token() is token
        refresher.assert_not_called()

    def test_refreshes_expired_token(self, clock, expired_token):
        new_token = _token(clock)
        refresher = MagicMock(return_value=new_token)
        store = TokenStore(expired_token, refresher=refresher)

        assert store.current_token() is new_token
        refresher.assert_called_once_with(expired_token)
        assert store.refresh_count == 1

    def test_never_returns_expired_token(self, clock, token):
        refresher = MagicMock(side_effect=lambda old: _token(clock, 'renewed'))
        store = TokenStore(token, refresher=refresher)

        clock.advance(3601)
        current = store.current_token()

        assert current.access_token == 'renewed'
        assert not current.is_expired

    def test_raises_when_automatic_refresh_disabled(self, expired_token):
        store = TokenStore(
            expired_token, refresher=MagicMock(), automatic_refresh=False
        )
        with pytest.raises(SpotifyTokenExpiredError):
            store.current_token()

    def test_raises_token_error_without_refresher(self, expired_token):
        store = TokenStore(expired_token)
        with pytest.raises(SpotifyTokenError):
            store.current_token()


class TestRefresh:
    """Tests for refresh()."""

    def test_manual_refresh_always_calls_refresher(self, clock, token):
        new_token = _token(clock, 'manual')
        store = TokenStore(token, refresher=MagicMock(return_value=new_token))

        assert store.refresh() is new_token
        assert store.token is new_token

    def test_stale_token_already_replaced(self, clock, token):
        new_token = _token(clock, 'other')
        refresher = MagicMock()
        store = TokenStore(new_token, refresher=refresher)

        assert store.refresh(stale=token) is new_token
        refresher.assert_not_called()

    def test_wraps_api_errors(self, expired_token):
        refresher = MagicMock(side_effect=SpotifyAPIError('boom', status_code=500))
        store = TokenStore(expired_token, refresher=refresher)

        with pytest.raises(SpotifyAuthError):
            store.refresh()

    def test_auth_errors_propagate_unchanged(self, expired_token):
        refresher = MagicMock(side_effect=SpotifyTokenError('revoked'))
        store = TokenStore(expired_token, refresher=refresher)

        with pytest.raises(SpotifyTokenError, match='revoked'):
            store.refresh()

    def test_rejects_expired_result(self, clock, expired_token):
        store = TokenStore(
            expired_token, refresher=MagicMock(return_value=expired_token)
        )
        with pytest.raises(SpotifyTokenError):
            store.refresh()

    def test_replace(self, clock, token):
        store = TokenStore(token)
        other = _token(clock, 'replaced')
        store.replace(other)
        assert store.token is other


class TestConcurrentRefresh:
    """Concurrent callers share a single refresh."""

    def test_concurrent_current_token_refreshes_once(self, clock, expired_token):
        new_token = _token(clock, 'shared')
        calls = []

        def slow_refresher(old):
            calls.append(old)
            time.sleep(0.05)
            return new_token

        store = TokenStore(expired_token, refresher=slow_refresher)
        barrier = threading.Barrier(8)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            result = store.current_token()
            with results_lock:
                results.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(result is new_token for result in results)
        assert store.refresh_count == 1

    def test_concurrent_401_refreshes_once(self, clock, token):
        refresher = MagicMock(side_effect=lambda old: _token(clock, 'after-401'))
        store = TokenStore(token, refresher=refresher)
        barrier = threading.Barrier(5)

        def worker():
            barrier.wait()
            store.refresh(stale=token)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert refresher.call_count == 1
        assert store.token.access_token == 'after-401'

    def test_leeway_as_long_as_lifetime_refreshes_once(self, clock, expired_token):
        refresher = MagicMock(side_effect=lambda old: _token(clock, 'issued'))
        store = TokenStore(expired_token, refresher=refresher, leeway=3600)
        barrier = threading.Barrier(5)

        def worker():
            barrier.wait()
            store.current_token()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.current_token().access_token == 'issued'
        assert refresher.call_count == 1
        assert store.state is TokenState.VALID

    def test_issued_token_refreshed_near_expiry(self, clock, expired_token):
        refresher = MagicMock(side_effect=lambda old: _token(clock, 'issued'))
        store = TokenStore(expired_token, refresher=refresher, leeway=3600)
        store.current_token()

        clock.advance(1801)

        assert store.needs_refresh
        store.current_token()
        assert refresher.call_count == 2
