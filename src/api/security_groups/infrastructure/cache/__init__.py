"""PermissionCache backends."""

from security_groups.infrastructure.cache.in_memory import InMemoryPermissionCache
from security_groups.infrastructure.cache.redis_cache import RedisPermissionCache

__all__ = [
    "InMemoryPermissionCache",
    "RedisPermissionCache",
]
