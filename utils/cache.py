"""In-memory TTL cache for the insights API.

Distinct filter values only change when the store is reseeded, so the
filters endpoint keeps them here keyed on the store file's revision.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    """Thread-safe key/value cache whose entries expire after ``ttl_seconds``.

    At most ``maxsize`` entries are kept; inserting into a full cache evicts
    the entry closest to expiry.

    Usage::

        cache = TTLCache(maxsize=8, ttl_seconds=300)
        options = cache.get_or_compute(("filters", rev), lambda: load(conn))
    """

    def __init__(self, maxsize: int = 128, ttl_seconds: float = 300.0) -> None:
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        # key -> (value, expires_at on the monotonic clock)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Any) -> Any | None:
        """Return the cached value for *key*, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if time.monotonic() > expires_at:
                del self._store[key]
                return None
            return value

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key* with the configured TTL."""
        expires_at = time.monotonic() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                soonest = min(self._store, key=lambda k: self._store[k][1])
                del self._store[soonest]
            self._store[key] = (value, expires_at)

    def get_or_compute(self, key: Any, compute: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, computing and storing it on a miss.

        ``compute`` runs outside the lock; concurrent misses may both compute,
        and the last writer wins.
        """
        value = self.get(key)
        if value is None:
            value = compute()
            self.set(key, value)
        return value
