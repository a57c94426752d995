"""Permission cache dependency wiring.

One cache backend is shared by the whole process; the coordinator that
wraps it is cheap and built per request.
"""

from __future__ import annotations

import threading
from typing import Annotated

from fastapi import Depends

from infrastructure.settings import get_cache_settings
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import DefaultPermissionCacheProbe
from security_groups.infrastructure.cache import (
    InMemoryPermissionCache,
    RedisPermissionCache,
)
from security_groups.ports.cache import PermissionCache

_cache: InMemoryPermissionCache | RedisPermissionCache | None = None
_cache_lock = threading.Lock()


def get_permission_cache() -> PermissionCache:
    """Get the process-wide cache backend selected by settings (singleton)."""
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                settings = get_cache_settings()
                if settings.backend == "redis":
                    _cache = RedisPermissionCache.from_url(
                        settings.redis_url,
                        key_prefix=settings.key_prefix,
                        index_ttl_seconds=max(
                            settings.decision_ttl_seconds, settings.group_ttl_seconds
                        ),
                    )
                else:
                    _cache = InMemoryPermissionCache()
    return _cache


async def close_permission_cache() -> None:
    """Release the cache backend. Should be called on application shutdown."""
    global _cache
    if _cache is not None:
        await _cache.close()
        _cache = None


def get_cache_coordinator(
    cache: Annotated[PermissionCache, Depends(get_permission_cache)],
) -> PermissionCacheCoordinator:
    """Get a PermissionCacheCoordinator configured from settings."""
    settings = get_cache_settings()
    return PermissionCacheCoordinator(
        cache=cache,
        key_prefix=settings.key_prefix,
        decision_ttl_seconds=settings.decision_ttl_seconds,
        group_ttl_seconds=settings.group_ttl_seconds,
        probe=DefaultPermissionCacheProbe(),
    )
