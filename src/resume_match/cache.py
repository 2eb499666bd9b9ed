"""
Bounded in-memory embedding cache.
"""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict


DEFAULT_CACHE_CAPACITY = 100
CACHE_KEY_PREFIX_CHARS = 200


def make_cache_key(text: str, tag: str) -> str:
    """Stable key from the first 200 characters of *text* and a model tag."""
    payload = f"{tag}\x00{text[:CACHE_KEY_PREFIX_CHARS]}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


class EmbeddingCache:
    """
    FIFO cache of embedding vectors.

    Eviction follows insertion order, not recency of use. Entries are not
    tagged individually with a dimension, so the owner must call ``clear()``
    whenever the embedding model or its dimensionality changes.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self.capacity = capacity
        self._entries: OrderedDict[str, list[float]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> list[float] | None:
        with self._lock:
            vector = self._entries.get(key)
        return list(vector) if vector is not None else None

    def put(self, key: str, vector: list[float]) -> None:
        with self._lock:
            if key in self._entries:
                # Keep the original insertion slot.
                self._entries[key] = list(vector)
                return
            while len(self._entries) >= self.capacity:
                self._entries.popitem(last=False)
            self._entries[key] = list(vector)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
