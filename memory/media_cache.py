"""Advisory session-scoped cache for resolved media descriptors."""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Hashable, Optional, TypeVar

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    created_at: float = field(default_factory=lambda: time.time())


class MediaCache(Generic[V]):
    """In-memory key to value store living for one session.

    Entries are never invalidated; the mapping they memoise is static, so the
    cache is purely an optimisation and callers must not depend on it.
    """

    def __init__(self) -> None:
        self._entries: Dict[Hashable, CacheEntry[V]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
        return entry.value if entry else None

    def set(self, key: Hashable, value: V) -> V:
        with self._lock:
            self._entries[key] = CacheEntry(value=value)
        return value

    def get_or_resolve(self, key: Hashable, resolver: Callable[[], V]) -> V:
        """Return the cached value or resolve, store and return it under the lock."""

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self.hits += 1
                return entry.value
            self.misses += 1
            value = resolver()
            self._entries[key] = CacheEntry(value=value)
            return value

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Drop every entry; only used when a session ends."""

        with self._lock:
            self._entries.clear()


__all__ = ["CacheEntry", "MediaCache"]
