"""
Response caching for Spotify API GET requests.

Spotify marks many responses cacheable with ``Cache-Control: max-age``
and an ``ETag``. Fresh entries are served without a request; stale
entries that carry an ETag are revalidated with ``If-None-Match`` and
reused on ``304 Not Modified``.

Two storage backends are provided: an in-process dict (default) and
Redis, for sharing a cache between processes.
"""

import json
import logging
import re
import threading
import time
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Mapping, Optional

import redis

logger = logging.getLogger(__name__)

_MAX_AGE_PATTERN = re.compile(r"max-age=(\d+)")


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup that also works on plain dicts."""
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


@dataclass(frozen=True)
class CacheState:
    """A cached response body plus what is needed to judge its freshness."""

    data: str
    etag: Optional[str]
    expire_by: float

    def is_still_valid(self, now: float) -> bool:
        return now <= self.expire_by

    @staticmethod
    def max_age(cache_control: Optional[str]) -> Optional[int]:
        """Extract ``max-age`` seconds; None if absent or caching is forbidden."""
        if not cache_control:
            return None
        lowered = cache_control.lower()
        if "no-store" in lowered or "no-cache" in lowered:
            return None
        match = _MAX_AGE_PATTERN.search(lowered)
        return int(match.group(1)) if match else None

    @staticmethod
    def is_shareable(cache_control: Optional[str]) -> bool:
        """Whether a response may be stored in a cache shared between users."""
        if not cache_control:
            return True
        lowered = cache_control.lower()
        return "private" not in lowered and "no-store" not in lowered


class InMemoryCacheBackend:
    """
    Thread-safe dict backend.

    When more than ``cache_limit`` entries are held, the entries closest
    to expiry are evicted first.
    Stale entries carrying an ETag are dropped once
    ``revalidation_ttl`` seconds have passed since they expired.
    """

    def __init__(
        self, cache_limit: Optional[int] = 200, revalidation_ttl: float = 3600
    ):
        self._entries: Dict[str, CacheState] = {}
        self._cache_limit = cache_limit
        self._revalidation_ttl = revalidation_ttl
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheState]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, state: CacheState, now: float) -> None:
        with self._lock:
            self._entries[key] = state
            self._prune(now)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        # Stale entries are only kept while they can still be revalidated.
        for key in [
            k for k, s in self._entries.items()
            if not s.is_still_valid(now)
            and (not s.etag or now > s.expire_by + self._revalidation_ttl)
        ]:
            del self._entries[key]

        if self._cache_limit is None:
            return
        overflow = len(self._entries) - self._cache_limit
        if overflow > 0:
            by_expiry = sorted(
                self._entries.items(), key=lambda item: item[1].expire_by
            )
            for key, _ in by_expiry[:overflow]:
                del self._entries[key]


class RedisCacheBackend:
    """
    Redis backend.

    Entries are stored as JSON with a Redis TTL; entries carrying an
    ETag are kept for ``revalidation_ttl`` extra seconds so they can
    still be revalidated. Redis errors degrade to cache misses.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "spotikit:cache:",
        revalidation_ttl: int = 3600,
    ):
        self._redis = redis_client
        self._prefix = key_prefix
        self._revalidation_ttl = revalidation_ttl

    @classmethod
    def from_url(cls, redis_url: str, **kwargs) -> "RedisCacheBackend":
        """Create a backend from a Redis connection URL."""
        return cls(redis.from_url(redis_url, decode_responses=False), **kwargs)

    def _make_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[CacheState]:
        try:
            data = self._redis.get(self._make_key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis error getting cached response: {e}")
            return None
        if not data:
            return None
        try:
            return CacheState(**json.loads(data.decode("utf-8")))
        except (ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            self.delete(key)
            return None

    def set(self, key: str, state: CacheState, now: float) -> None:
        ttl = max(int(state.expire_by - now), 0)
        if state.etag:
            ttl += self._revalidation_ttl
        if ttl <= 0:
            return
        try:
            self._redis.setex(
                self._make_key(key), ttl, json.dumps(asdict(state)).encode("utf-8")
            )
        except redis.RedisError as e:
            logger.warning(f"Redis error setting cached response: {e}")

    def delete(self, key: str) -> None:
        try:
            self._redis.delete(self._make_key(key))
        except redis.RedisError as e:
            logger.warning(f"Redis error deleting cached response: {e}")

    def clear(self) -> None:
        try:
            keys = list(self._redis.scan_iter(match=f"{self._prefix}*"))
            if keys:
                self._redis.delete(*keys)
        except redis.RedisError as e:
            logger.warning(f"Redis error clearing cache: {e}")


class SpotifyCache:
    """
    Cache of GET responses keyed by full request URL.

    Example:
        cache = SpotifyCache(InMemoryCacheBackend(cache_limit=100))
        state = cache.lookup(url)
        if state and cache.is_fresh(state):
            body = state.data
    """

    def __init__(self, backend=None, clock: Callable[[], float] = time.time):
        self._backend = backend if backend is not None else InMemoryCacheBackend()
        self._clock = clock

    @property
    def backend(self):
        return self._backend

    def lookup(self, url: str) -> Optional[CacheState]:
        state = self._backend.get(url)
        if state is None:
            logger.debug(f"Cache miss for {url}")
        return state

    def is_fresh(self, state: CacheState) -> bool:
        return state.is_still_valid(self._clock())

    def store(
        self, url: str, body: str, headers: Mapping[str, str]
    ) -> Optional[CacheState]:
        """
        Cache a successful response if its headers allow it.

        Returns:
            The stored state, or None if the response is not cacheable.
        """
        now = self._clock()
        cache_control = _header(headers, "Cache-Control")
        if not CacheState.is_shareable(cache_control):
            logger.debug(f"Not caching user-specific response for {url}")
            return None
        max_age = CacheState.max_age(cache_control)
        etag = _header(headers, "ETag")
        if max_age is None and not etag:
            return None
        state = CacheState(
            data=body, etag=etag, expire_by=now + (max_age or 0)
        )
        self._backend.set(url, state, now)
        logger.debug(f"Cached response for {url} (max-age: {max_age})")
        return state

    def revalidated(
        self, url: str, state: CacheState, headers: Mapping[str, str]
    ) -> CacheState:
        """Extend a cached entry after a ``304 Not Modified``."""
        now = self._clock()
        max_age = CacheState.max_age(_header(headers, "Cache-Control")) or 0
        renewed = CacheState(
            data=state.data,
            etag=_header(headers, "ETag") or state.etag,
            expire_by=now + max_age,
        )
        self._backend.set(url, renewed, now)
        logger.debug(f"Revalidated cached response for {url}")
        return renewed

    def invalidate(self, url: str) -> None:
        self._backend.delete(url)

    def clear(self) -> None:
        self._backend.clear()
