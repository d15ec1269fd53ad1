"""In-process fixed-window request limiter keyed by client address."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class _Window:
    started_at: float
    hits: int = 0


class FixedWindowLimiter:
    """
    Allow at most max_requests per key within window_seconds.

    A key's window opens at its first request and resets once window_seconds
    have passed. Every request counts, whatever its outcome. max_requests=0
    disables the limit.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> bool:
        """Count one request for key. Returns False when it is over the limit."""
        if not self.max_requests:
            return True
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.window_seconds:
                self._drop_expired(now)
                window = _Window(started_at=now)
                self._windows[key] = window
            window.hits += 1
            return window.hits <= self.max_requests

    def _drop_expired(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for key in expired:
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
