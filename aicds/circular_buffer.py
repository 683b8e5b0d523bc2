"""Thread-safe fixed-capacity ring buffer that overwrites its oldest item."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class CircularBuffer(Generic[T]):
    """Fixed-size FIFO; pushing into a full buffer drops the oldest item."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def push(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def pop(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        with self._lock:
            return self._items.popleft() if self._items else None

    def items(self) -> list[T]:
        """Return a snapshot of the contents, oldest first."""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()