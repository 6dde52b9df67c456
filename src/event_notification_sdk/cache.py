"""
Bounded in-memory cache of public keys.
"""

from __future__ import annotations

import threading

from cachetools import LRUCache

from .constants import DEFAULT_CACHE_SIZE
from .models import PublicKey


class KeyCache:
    """
    Least-recently-used cache mapping key ids to public keys.

    Entries never expire by time, only by eviction once ``maxsize`` is
    exceeded. Access is guarded by a lock so one instance can be shared
    between threads as well as coroutines.

    Args:
        maxsize: Maximum number of keys held. Default: 100
    """

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE):
        self._cache: LRUCache[str, PublicKey] = LRUCache(maxsize=maxsize)
        self._lock = threading.Lock()

    @property
    def maxsize(self) -> int:
        return int(self._cache.maxsize)

    def get(self, key_id: str) -> PublicKey | None:
        with self._lock:
            return self._cache.get(key_id)

    def put(self, key_id: str, record: PublicKey) -> None:
        with self._lock:
            self._cache[key_id] = record

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __contains__(self, key_id: object) -> bool:
        with self._lock:
            return key_id in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
