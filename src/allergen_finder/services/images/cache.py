"""Bounded FIFO cache of resolved display images.

One instance is created at startup and shared by every request; it is
passed into the ImageResolver rather than referenced globally.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CachedImage:
    """A cached resolution outcome. ``url`` None is a cached negative result."""

    url: str | None


class ImageCache:
    """Insertion-ordered cache with first-in-first-out eviction.

    Reads never refresh an entry's position: once full, the next insert
    evicts the oldest-inserted key regardless of how recently it was read.
    Safe to share between concurrent tasks and threads.
    """

    def __init__(self, capacity: int = 500) -> None:
        if capacity < 1:
            msg = "capacity must be at least 1"
            raise ValueError(msg)
        self._capacity = capacity
        self._entries: OrderedDict[str, CachedImage] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Maximum number of entries."""
        return self._capacity

    def get(self, key: str) -> CachedImage | None:
        """Return the cached outcome for a key, or None on a miss."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, url: str | None) -> None:
        """Store an outcome, evicting the oldest entry past capacity.

        Overwriting an existing key keeps its original insertion position.
        """
        with self._lock:
            self._entries[key] = CachedImage(url)
            while len(self._entries) > self._capacity:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
