"""Process-local response cache keyed by endpoint family and query parameters."""

import json
import threading
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")


class ResponseCache:
    """
    Read-through cache for computed responses.

    Keys are the endpoint family plus the serialized query parameters. Any
    write anywhere in the system calls clear(); entries older than ttl_seconds
    are recomputed on the next read (ttl_seconds=0 keeps them until clear()).
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(family: str, params: Mapping[str, Any] | None = None) -> str:
        return family + ":" + json.dumps(dict(params or {}), sort_keys=True, default=str)

    def get(self, family: str, params: Mapping[str, Any] | None = None) -> Any | None:
        key = self.make_key(family, params)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self.ttl_seconds and self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, family: str, params: Mapping[str, Any] | None, value: Any) -> None:
        key = self.make_key(family, params)
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def get_or_compute(
        self,
        family: str,
        params: Mapping[str, Any] | None,
        compute: Callable[[], T],
    ) -> T:
        """Return the cached value for (family, params), computing and storing it on a miss."""
        cached = self.get(family, params)
        if cached is not None:
            return cached
        value = compute()
        self.set(family, params, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
