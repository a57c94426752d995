"""In-process PermissionCache backend.

Suitable for a single API process and for tests; entries expire against an
injectable monotonic clock. Expired entries are swept from ``set`` at most
once per ``sweep_interval_seconds``, so memory is bounded by the live keys.
"""

from __future__ import annotations

import copy
import time
from collections import defaultdict
from typing import Any, Callable, Iterable


class InMemoryPermissionCache:
    """Dictionary-backed cache with TTLs and a scope -> keys index."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = 60.0,
    ) -> None:
        self._clock = clock
        self._sweep_interval_seconds = sweep_interval_seconds
        self._next_sweep_at = clock() + sweep_interval_seconds
        self._entries: dict[str, tuple[Any, float]] = {}
        self._index: dict[str, set[str]] = defaultdict(set)
        self._scopes_by_key: dict[str, set[str]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            self._drop(key)
            return None
        return copy.deepcopy(value)

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: int,
        scopes: Iterable[str],
    ) -> None:
        now = self._clock()
        if now >= self._next_sweep_at:
            self._sweep(now)

        self._drop(key)
        self._entries[key] = (copy.deepcopy(value), now + ttl_seconds)
        key_scopes = set(scopes)
        self._scopes_by_key[key] = key_scopes
        for scope in key_scopes:
            self._index[scope].add(key)

    async def invalidate(self, *scopes: str) -> int:
        removed = 0
        for scope in scopes:
            for key in list(self._index.get(scope, ())):
                if self._drop(key):
                    removed += 1
        return removed

    async def close(self) -> None:
        self._entries.clear()
        self._index.clear()
        self._scopes_by_key.clear()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def scope_count(self) -> int:
        """Number of scopes that still index at least one key."""
        return len(self._index)

    def _sweep(self, now: float) -> None:
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if now >= expires_at
        ]
        for key in expired:
            self._drop(key)
        self._next_sweep_at = now + self._sweep_interval_seconds

    def _drop(self, key: str) -> bool:
        """Remove ``key`` and its index entries; True if it was cached."""
        for scope in self._scopes_by_key.pop(key, ()):
            keys = self._index.get(scope)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._index[scope]
        return self._entries.pop(key, None) is not None
