"""
Deferred request actions.

Every endpoint method returns a SpotifyRestAction instead of performing
the request. The action can then be run on the calling thread
(``complete``), on a worker pool with callbacks (``queue``), or awaited
from asyncio code (``suspend``). Actions never cache their result: each
run invokes the supplier again.
"""

import asyncio
import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from .exceptions import SpotifyBadRequestError, SpotifyCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ErrorCallback = Callable[[Exception], None]

_default_executor: Optional[ThreadPoolExecutor] = None
_default_executor_lock = threading.Lock()


def default_executor() -> ThreadPoolExecutor:
    """Shared pool for actions not bound to an API instance's pool."""
    global _default_executor
    with _default_executor_lock:
        if _default_executor is None:
            _default_executor = ThreadPoolExecutor(
                max_workers=4, thread_name_prefix="spotikit"
            )
        return _default_executor


def catch_bad_request(function: Callable[[], T]) -> Optional[T]:
    """
    Run ``function``, turning 400/404 responses into None.

    Any other failure is a larger problem and propagates.
    """
    try:
        return function()
    except SpotifyBadRequestError as e:
        if e.status_code not in (400, 404):
            raise
        logger.debug(f"Suppressed bad request: {e}")
        return None


class CancellationToken:
    """
    Cooperative cancellation flag for queued actions.

    Checked when a queued action is picked up by a worker; a request
    that is already in flight is allowed to finish.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class SpotifyRestAction(Generic[T]):
    """
    A re-runnable unit of work producing ``T``.

    Args:
        supplier: Zero-argument callable doing the actual work.
        executor: Pool used by ``queue``; defaults to a shared pool.

    Example:
        artist = api.artists.get_artist("0TnOYISbd1XYRBk9myaseg").complete()

        api.artists.get_artist(artist_id).queue(
            on_error=lambda e: print("failed", e),
            on_success=lambda a: print(a.name),
        )

        artist = await api.artists.get_artist(artist_id).suspend()
    """

    def __init__(
        self,
        supplier: Callable[[], T],
        executor: Optional[Executor] = None,
    ):
        self._supplier = supplier
        self._executor = executor
        self._has_run = False
        self._has_completed = False

    @property
    def supplier(self) -> Callable[[], T]:
        return self._supplier

    @property
    def has_run(self) -> bool:
        """Whether this action has been started at least once."""
        return self._has_run

    @property
    def has_completed(self) -> bool:
        """Whether a run of this action has finished successfully."""
        return self._has_completed

    def _derive(self, supplier: Callable[[], R]) -> "SpotifyRestAction[R]":
        return SpotifyRestAction(supplier, self._executor)

    # -----------------------------------------------------------------
    # Execution modes
    # -----------------------------------------------------------------

    def complete(self) -> T:
        """Invoke the supplier on the calling thread and return its result."""
        self._has_run = True
        result = self._supplier()
        self._has_completed = True
        return result

    def queue(
        self,
        on_error: Optional[ErrorCallback] = None,
        on_success: Optional[Callable[[T], None]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> "Future[T]":
        """
        Run the supplier on a worker thread.

        Exactly one of ``on_error`` / ``on_success`` is called, once, on
        the worker thread. Without ``on_error`` failures are logged.

        Args:
            on_error: Called with the exception if the supplier fails or
                the action was cancelled before it started.
            on_success: Called with the result.
            cancel_token: Checked before the supplier is invoked.

        Returns:
            A Future resolving to the result (or the failure).
        """
        self._has_run = True
        executor = self._executor or default_executor()

        def run() -> T:
            try:
                if cancel_token is not None and cancel_token.is_cancelled:
                    raise SpotifyCancelledError(
                        "Action was cancelled before it started"
                    )
                result = self.complete()
            except Exception as e:
                if on_error is not None:
                    on_error(e)
                else:
                    logger.error("Queued action failed: %s", e, exc_info=True)
                raise
            if on_success is not None:
                on_success(result)
            return result

        return executor.submit(run)

    def queue_after(
        self,
        delay: float,
        on_success: Callable[[T], None],
        on_error: Optional[ErrorCallback] = None,
    ) -> "Future[T]":
        """
        Start the supplier now and hand the result over after ``delay`` seconds.

        The delay counts from the call, not from completion of the request.
        """
        run_at = time.monotonic() + delay

        def deliver(result: T) -> None:
            remaining = max(run_at - time.monotonic(), 0)
            threading.Timer(remaining, on_success, args=(result,)).start()

        return self.queue(on_error=on_error, on_success=deliver)

    async def suspend(self, cancel_token: Optional[CancellationToken] = None) -> T:
        """
        Await the result from a coroutine.

        The supplier runs via ``queue``; the coroutine resumes with the
        result or the supplier's exception. Cancelling the awaiting task
        cancels the queued action if it has not started yet.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        token = cancel_token or CancellationToken()

        def resolve(setter, value) -> None:
            if not future.done():
                setter(value)

        def post(setter, value) -> None:
            # The awaiting loop may be gone once the task was cancelled
            if not loop.is_closed():
                loop.call_soon_threadsafe(resolve, setter, value)

        self.queue(
            on_error=lambda e: post(future.set_exception, e),
            on_success=lambda result: post(future.set_result, result),
            cancel_token=token,
        )
        try:
            return await future
        except asyncio.CancelledError:
            token.cancel()
            raise

    async def suspend_complete(self, executor: Optional[Executor] = None) -> T:
        """Run ``complete`` in ``executor`` (or the loop's default) and await it."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, self.complete)

    # -----------------------------------------------------------------
    # Combinators
    # -----------------------------------------------------------------

    def catching(self) -> "SpotifyRestAction[Optional[T]]":
        """Derived action that yields None instead of failing on 400/404."""
        return self._derive(lambda: catch_bad_request(self.complete))

    def map(self, transform: Callable[[T], R]) -> "SpotifyRestAction[R]":
        """Derived action applying ``transform`` to the result."""
        return self._derive(lambda: transform(self.complete()))


class SpotifyRestActionPaging(SpotifyRestAction[T]):
    """
    Action producing a page of results, with helpers to walk all pages.

    ``T`` is a paging object (see models/paging.py).
    """

    def get_all(self) -> SpotifyRestAction[List[T]]:
        """Action returning every page of the result set, in order."""
        return self._derive(lambda: self.complete().get_all_pages())

    def get_all_items(self) -> SpotifyRestAction[list]:
        """Action returning every item of every page, in order."""
        return self._derive(lambda: self.complete().collect_all_items())

    def stream_all_items(self, consumer: Callable[[object], None]) -> SpotifyRestAction[None]:
        """Action feeding each item to ``consumer`` as pages arrive."""

        def stream() -> None:
            for item in self.complete().iter_items():
                consumer(item)

        return self._derive(stream)

    def iter_all_items(self) -> Iterator:
        """Lazily fetch pages and yield their items (runs on this thread)."""
        return self.complete().iter_items()
