"""Sliding-window request rate limiter."""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable


class RateLimiter:
    """Allows at most ``max_requests`` within any ``window`` seconds."""

    def __init__(
        self,
        max_requests: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._requests: deque[float] = deque()
        self._lock = threading.Lock()

    def allow_request(self) -> bool:
        """Record and allow a request if the window has room for it."""
        with self._lock:
            now = self._clock()
            while self._requests and now - self._requests[0] > self.window:
                self._requests.popleft()
            if len(self._requests) < self.max_requests:
                self._requests.append(now)
                return True
            return False

    def current_requests(self) -> int:
        with self._lock:
            return len(self._requests)

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()