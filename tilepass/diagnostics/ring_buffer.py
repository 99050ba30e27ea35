"""Bounded event window for render diagnostics."""

from __future__ import annotations

from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Keeps the newest ``capacity`` items and counts what it evicted."""

    def __init__(self, capacity: int) -> None:
        if int(capacity) <= 0:
            raise ValueError("capacity must be > 0")
        self._items: deque[T] = deque(maxlen=int(capacity))
        self._evicted = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def capacity(self) -> int:
        return int(self._items.maxlen or 0)

    @property
    def evicted(self) -> int:
        return self._evicted

    def append(self, value: T) -> None:
        if len(self._items) == self.capacity:
            self._evicted += 1
        self._items.append(value)

    def clear(self) -> None:
        self._items.clear()
        self._evicted = 0

    def latest(self, limit: int | None = None) -> list[T]:
        """Oldest-first copy of the newest ``limit`` items (all when None)."""
        if limit is None:
            return list(self._items)
        count = max(0, int(limit))
        if count == 0:
            return []
        return list(self._items)[-count:]
