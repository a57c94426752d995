"""Cache coordination for permission lookups.

Builds tenant-scoped cache keys and invalidation scopes, and shields the
resolver and the mutating services from cache backend failures: a failed
read is treated as a miss and a failed write or invalidation is logged.
"""

from __future__ import annotations

from typing import Any, Iterable

from security_groups.application.observability import (
    DefaultPermissionCacheProbe,
    PermissionCacheProbe,
)
from security_groups.domain.value_objects import RecordAction, RecordRef, TenantId, UserId
from security_groups.ports.cache import PermissionCache
from security_groups.ports.exceptions import CacheUnavailableError

DEFAULT_DECISION_TTL_SECONDS = 300
DEFAULT_GROUP_TTL_SECONDS = 600


class PermissionCacheCoordinator:
    """Key builder and failure-tolerant facade over a PermissionCache.

    Every key is registered under its tenant scope, so a hierarchy mutation
    can drop everything cached for the tenant. User-derived keys are also
    registered under the user scope and decisions under the record scope.
    """

    def __init__(
        self,
        cache: PermissionCache,
        key_prefix: str = "security_groups",
        decision_ttl_seconds: int = DEFAULT_DECISION_TTL_SECONDS,
        group_ttl_seconds: int = DEFAULT_GROUP_TTL_SECONDS,
        probe: PermissionCacheProbe | None = None,
    ):
        self._cache = cache
        self._prefix = key_prefix
        self.decision_ttl_seconds = decision_ttl_seconds
        self.group_ttl_seconds = group_ttl_seconds
        self._probe = probe or DefaultPermissionCacheProbe()

    # Scopes

    @staticmethod
    def tenant_scope(tenant_id: TenantId) -> str:
        return f"tenant:{tenant_id.value}"

    @staticmethod
    def user_scope(tenant_id: TenantId, user_id: UserId) -> str:
        return f"user:{tenant_id.value}:{user_id.value}"

    @staticmethod
    def record_scope(tenant_id: TenantId, record: RecordRef) -> str:
        return f"record:{tenant_id.value}:{record.record_type}:{record.record_id}"

    # Keys

    def hierarchy_key(self, tenant_id: TenantId) -> str:
        return f"{self._prefix}:{tenant_id.value}:hierarchy"

    def effective_groups_key(self, tenant_id: TenantId, user_id: UserId) -> str:
        return f"{self._prefix}:{tenant_id.value}:effective_groups:{user_id.value}"

    def effective_permissions_key(self, tenant_id: TenantId, user_id: UserId) -> str:
        return (
            f"{self._prefix}:{tenant_id.value}:effective_permissions:{user_id.value}"
        )

    def access_key(
        self,
        tenant_id: TenantId,
        user_id: UserId,
        record: RecordRef,
        action: RecordAction,
        field: str | None = None,
    ) -> str:
        key = (
            f"{self._prefix}:{tenant_id.value}:access:{user_id.value}:"
            f"{record.record_type}:{record.record_id}:{action.value}"
        )
        if field is not None:
            key = f"{key}:{field}"
        return key

    # Backend access

    async def get(self, key: str) -> Any | None:
        """Return the cached value, treating an unavailable backend as a miss."""
        try:
            return await self._cache.get(key)
        except CacheUnavailableError as e:
            self._probe.cache_unavailable(operation="get", key=key, error=str(e))
            return None

    async def set(
        self, key: str, value: Any, ttl_seconds: int, scopes: Iterable[str]
    ) -> None:
        """Store a value; backend failures are logged and otherwise ignored."""
        try:
            await self._cache.set(key, value, ttl_seconds, list(scopes))
        except CacheUnavailableError as e:
            self._probe.cache_unavailable(operation="set", key=key, error=str(e))

    async def invalidate(self, *scopes: str) -> int:
        """Drop every key registered under ``scopes``.

        Must only be called after the mutating transaction committed.

        Returns:
            Number of keys removed (0 when the backend is unavailable)
        """
        if not scopes:
            return 0
        try:
            removed = await self._cache.invalidate(*scopes)
        except CacheUnavailableError as e:
            self._probe.cache_unavailable(
                operation="invalidate", key=",".join(scopes), error=str(e)
            )
            return 0
        self._probe.cache_invalidated(scopes=list(scopes), keys_removed=removed)
        return removed
