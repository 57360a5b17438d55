"""Tests for SpotifyRestAction and its execution modes."""

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from spotikit.actions import (
    CancellationToken,
    SpotifyRestAction,
    catch_bad_request,
)
from spotikit.exceptions import (
    SpotifyBadRequestError,
    SpotifyCancelledError,
    SpotifyForbiddenError,
    SpotifyNotFoundError,
)


class TestComplete:
    """Tests for complete()."""

    def test_returns_supplier_value(self):
        assert SpotifyRestAction(lambda: 42).complete() == 42

    def test_never_memoizes(self):
        supplier = MagicMock(return_value="value")
        action = SpotifyRestAction(supplier)

        assert action.complete() == "value"
        assert action.complete() == "value"
        assert supplier.call_count == 2

    def test_propagates_errors(self):
        action = SpotifyRestAction(MagicMock(side_effect=SpotifyForbiddenError("no")))
        with pytest.raises(SpotifyForbiddenError):
            action.complete()

    def test_run_flags(self):
        action = SpotifyRestAction(lambda: 1)
        assert not action.has_run
        action.complete()
        assert action.has_run and action.has_completed

    def test_failed_run_is_not_completed(self):
        action = SpotifyRestAction(MagicMock(side_effect=ValueError("x")))
        with pytest.raises(ValueError):
            action.complete()
        assert action.has_run and not action.has_completed


class TestQueue:
    """Tests for queue()."""

    def test_success_callback_on_worker_thread(self, executor):
        caller = threading.current_thread()
        seen = []
        done = threading.Event()

        def on_success(value):
            seen.append((value, threading.current_thread()))
            done.set()

        on_error = MagicMock()
        future = SpotifyRestAction(lambda: "ok", executor).queue(
            on_error=on_error, on_success=on_success
        )

        assert future.result(timeout=5) == "ok"
        assert done.wait(timeout=5)
        assert len(seen) == 1
        assert seen[0][0] == "ok"
        assert seen[0][1] is not caller
        on_error.assert_not_called()

    def test_error_callback_exactly_once(self, executor):
        caller = threading.current_thread()
        error = SpotifyNotFoundError("missing")
        threads = []
        done = threading.Event()

        def record_thread(_exc):
            threads.append(threading.current_thread())
            done.set()

        on_error = MagicMock(side_effect=record_thread)
        on_success = MagicMock()

        future = SpotifyRestAction(MagicMock(side_effect=error), executor).queue(
            on_error=on_error, on_success=on_success
        )

        with pytest.raises(SpotifyNotFoundError):
            future.result(timeout=5)
        assert done.wait(timeout=5)
        on_error.assert_called_once_with(error)
        on_success.assert_not_called()
        assert threads[0] is not caller

    def test_each_queue_is_a_new_execution(self, executor):
        supplier = MagicMock(return_value=1)
        action = SpotifyRestAction(supplier, executor)

        action.queue().result(timeout=5)
        action.queue().result(timeout=5)

        assert supplier.call_count == 2

    def test_cancelled_before_start(self, executor):
        supplier = MagicMock()
        on_error = MagicMock()
        token = CancellationToken()
        token.cancel()

        future = SpotifyRestAction(supplier, executor).queue(
            on_error=on_error, cancel_token=token
        )

        with pytest.raises(SpotifyCancelledError):
            future.result(timeout=5)
        supplier.assert_not_called()
        assert isinstance(on_error.call_args.args[0], SpotifyCancelledError)

    def test_queue_after_delivers_result(self, executor):
        delivered = threading.Event()
        results = []

        def on_success(value):
            results.append(value)
            delivered.set()

        SpotifyRestAction(lambda: "late", executor).queue_after(0.05, on_success)

        assert delivered.wait(timeout=5)
        assert results == ["late"]


class TestSuspend:
    """Tests for suspend()."""

    def test_returns_value(self, executor):
        action = SpotifyRestAction(lambda: {"id": "a"}, executor)
        assert asyncio.run(action.suspend()) == {"id": "a"}

    def test_raises_error_in_coroutine(self, executor):
        action = SpotifyRestAction(
            MagicMock(side_effect=SpotifyForbiddenError("premium only")), executor
        )
        with pytest.raises(SpotifyForbiddenError):
            asyncio.run(action.suspend())

    def test_task_cancellation_cancels_token(self):
        started = threading.Event()
        release = threading.Event()
        pool = ThreadPoolExecutor(max_workers=1)
        # Occupy the only worker so the suspended action cannot start
        pool.submit(lambda: (started.set(), release.wait(5)))
        started.wait(5)
        supplier = MagicMock()
        token = CancellationToken()

        async def main():
            task = asyncio.ensure_future(
                SpotifyRestAction(supplier, pool).suspend(cancel_token=token)
            )
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(main())
        release.set()
        pool.shutdown(wait=True)

        assert token.is_cancelled
        supplier.assert_not_called()

    def test_suspend_complete(self):
        action = SpotifyRestAction(lambda: 7)
        assert asyncio.run(action.suspend_complete()) == 7


class TestCombinators:
    """Tests for catching() and map()."""

    def test_catching_turns_400_into_none(self):
        error = SpotifyBadRequestError("bad id", status_code=400)
        action = SpotifyRestAction(MagicMock(side_effect=error)).catching()
        assert action.complete() is None

    def test_catching_turns_404_into_none(self):
        action = SpotifyRestAction(
            MagicMock(side_effect=SpotifyNotFoundError("missing"))
        ).catching()
        assert action.complete() is None

    def test_catching_reraises_403(self):
        action = SpotifyRestAction(
            MagicMock(side_effect=SpotifyForbiddenError("forbidden"))
        ).catching()
        with pytest.raises(SpotifyForbiddenError):
            action.complete()

    def test_catching_passes_values_through(self):
        assert SpotifyRestAction(lambda: 3).catching().complete() == 3

    def test_map(self):
        supplier = MagicMock(return_value=[1, 2, 3])
        action = SpotifyRestAction(supplier).map(len)

        assert action.complete() == 3
        assert action.complete() == 3
        assert supplier.call_count == 2

    def test_catch_bad_request_helper(self):
        assert catch_bad_request(lambda: "x") == "x"
