"""One-shot and repeating timers running callbacks on a background thread."""

from __future__ import annotations

import threading
from typing import Callable


class Timer:
    """Runs a callback once after a delay or repeatedly at an interval."""

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None
        self._cancel = threading.Event()
        self._running = False

    def set_timeout(self, callback: Callable[[], None], delay: float) -> None:
        """Call ``callback`` once after ``delay`` seconds unless stopped first."""
        self.stop()
        cancel = threading.Event()

        def run() -> None:
            if not cancel.wait(delay):
                callback()
                if not cancel.is_set():
                    self._running = False

        self._launch(cancel, run)

    def set_interval(self, callback: Callable[[], None], interval: float) -> None:
        """Call ``callback`` every ``interval`` seconds until stopped."""
        self.stop()
        cancel = threading.Event()

        def run() -> None:
            while not cancel.wait(interval):
                callback()

        self._launch(cancel, run)

    def _launch(self, cancel: threading.Event, target: Callable[[], None]) -> None:
        self._cancel = cancel
        self._running = True
        self._thread = threading.Thread(target=target, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Cancel any pending run and wait for the worker thread to finish."""
        self._running = False
        self._cancel.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    @property
    def running(self) -> bool:
        return self._running

    def __enter__(self) -> Timer:
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()