import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A stored payload and the moment it was fetched (seconds, clock units)."""

    data: Any
    fetched_at: float


class TTLCache:
    """In-memory TTL-backed key-value cache for forecast payloads.

    Parameters
    ----------
    ttl_seconds : float
        Time-to-live in seconds. An entry is fresh while `now - fetched_at < ttl`.
    clock : Callable[[], float], optional
        Source of the current time. Defaults to `time.time`; tests inject a fake.

    Notes
    -----
    - Keys are case-sensitive strings.
    - Payloads are stored as given; the cache never inspects or copies them.
    - Expiration is lazy (on `get`); there is no background reaper.
    - Access is serialized with a lock so the cache may be shared with threads.
    """

    def __init__(self, ttl_seconds: float, clock: Optional[Clock] = None):
        self.ttl = ttl_seconds
        self._clock = clock or time.time
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload for `key` if present and not expired.

        Parameters
        ----------
        key : str
            Cache key.

        Returns
        -------
        Optional[Any]
            The stored payload, or `None` if the key is missing or the entry expired.

        Notes
        -----
        - Performs lazy eviction: a stale entry is removed and `None` is returned.
        """

        now = self._clock()
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                logger.debug("Cache miss: %s", key)
                return None
            if now - entry.fetched_at >= self.ttl:
                del self._store[key]
                logger.debug("Cache expired: %s", key)
                return None
            logger.debug("Cache hit: %s", key)
            return entry.data

    def set(self, key: str, data: Any) -> None:
        """Insert or replace the payload for `key`, timestamped with the clock."""

        entry = CacheEntry(data=data, fetched_at=self._clock())
        with self._lock:
            self._store[key] = entry

    def clear(self) -> None:
        """Remove all entries from the cache.

        Used for explicit resets; nothing clears the cache automatically.
        """

        with self._lock:
            self._store.clear()
        logger.info("Weather cache cleared")
