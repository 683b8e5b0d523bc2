"""Thread-safe FIFO queue with optional blocking pop."""

from __future__ import annotations

import threading
from collections import deque
from typing import Generic, TypeVar

T = TypeVar("T")


class SafeQueue(Generic[T]):
    """Unbounded FIFO shared between threads."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._cond = threading.Condition()

    def push(self, value: T) -> None:
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def pop(self) -> T | None:
        """Return the oldest value without waiting, or None when empty."""
        with self._cond:
            return self._items.popleft() if self._items else None

    def pop_wait(self, timeout: float = 0) -> T | None:
        """Wait for a value; a positive timeout bounds the wait, otherwise wait indefinitely."""
        with self._cond:
            if timeout > 0:
                if not self._cond.wait_for(lambda: bool(self._items), timeout):
                    return None
            else:
                self._cond.wait_for(lambda: bool(self._items))
            return self._items.popleft()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)