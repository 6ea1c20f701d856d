"""Read-through cache with a fixed time-to-live."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Tuple

DEFAULT_TTL_SECONDS = 5 * 60


class TTLCache:
    """Mapping of key to ``(value, written_at)``.

    Entries older than ``ttl`` are evicted when read; nothing sweeps them in
    the background.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, written_at = entry
        if self._clock() - written_at > self.ttl:
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["DEFAULT_TTL_SECONDS", "TTLCache"]
