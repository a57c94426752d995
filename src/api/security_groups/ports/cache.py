"""Cache port for memoized permission lookups.

Every cached value is registered under one or more invalidation scopes.
Invalidating a scope drops exactly the keys registered under it, so
backends never need key-pattern scans.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable


@runtime_checkable
class PermissionCache(Protocol):
    """Keyed cache with TTL and scope-based invalidation.

    Values must be JSON-compatible. Implementations raise
    CacheUnavailableError when their backing store cannot be reached.
    """

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or after expiry."""
        ...

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: int,
        scopes: Iterable[str],
    ) -> None:
        """Store a value and register it under each scope."""
        ...

    async def invalidate(self, *scopes: str) -> int:
        """Drop every key registered under any of ``scopes``.

        Returns:
            Number of keys removed
        """
        ...
