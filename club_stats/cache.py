# club_stats/cache.py
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Tuple


def make_key(namespace: str, *parts: object) -> str:
    """
    Enforce namespaced cache keys to avoid collisions.
    Example:
      make_key("batting-rows", 3)    -> "batting-rows:3"
      make_key("batting-rows", None) -> "batting-rows:all"
    """
    namespace = namespace.strip()
    if not namespace:
        raise ValueError("Cache namespace must be non-empty")
    tail = [("all" if p is None else str(p).strip()) for p in parts]
    return ":".join([namespace, *[t for t in tail if t]])


class TTLCache:
    """
    Simple in-memory TTL cache (sufficient for single-instance deploys).
    key -> (expires_at_epoch, value)
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._items: Dict[str, Tuple[float, Any]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        item = self._items.get(key)
        if not item:
            return None

        expires_at, value = item
        if self._clock() > expires_at:
            self._items.pop(key, None)
            return None

        return value

    def set(self, key: str, value: Any, ttl_seconds: int = 60) -> None:
        if ttl_seconds <= 0:
            # Do not cache if TTL is invalid
            return
        self._items[key] = (self._clock() + ttl_seconds, value)

    def clear(self) -> None:
        self._items.clear()

    def debug_snapshot(self) -> Dict[str, float]:
        """
        Returns current cache keys with remaining TTL (seconds).
        """
        now = self._clock()
        return {k: max(0.0, exp - now) for k, (exp, _) in self._items.items()}
