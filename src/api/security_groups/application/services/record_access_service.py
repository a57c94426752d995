"""Record access ledger application service for the Security Groups context."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultRecordAccessServiceProbe,
    RecordAccessServiceProbe,
)
from security_groups.application.services.group_lookup import require_scoped_group
from security_groups.domain.aggregates import (
    AuditAction,
    AuditTargetType,
    RecordAccessGrant,
)
from security_groups.domain.value_objects import (
    AccessLevel,
    FieldPermissions,
    GroupId,
    RecordRef,
    TenantId,
    UserId,
)
from security_groups.ports.repositories import (
    IRecordAccessRepository,
    ISecurityGroupRepository,
)


class RecordAccessService:
    """Application service for (group, record) grants.

    Grant and revoke are idempotent upserts/deletes. Each change drops
    every cached decision about the record, for all users, after commit.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: ISecurityGroupRepository,
        record_access_repository: IRecordAccessRepository,
        audit_trail: AuditTrail,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: RecordAccessServiceProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._record_access_repository = record_access_repository
        self._audit = audit_trail
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultRecordAccessServiceProbe()

    async def _invalidate_record(self, record: RecordRef) -> None:
        await self._cache.invalidate(
            self._cache.record_scope(self._scope_to_tenant, record)
        )

    async def grant_record_access(
        self,
        group_id: GroupId,
        record: RecordRef,
        acting_user_id: UserId,
        access_level: AccessLevel | str = AccessLevel.READ,
        field_permissions: Mapping[str, Any] | FieldPermissions | None = None,
    ) -> RecordAccessGrant:
        """Create or replace the grant a group holds on a record.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
            ValueError: If the access level or field map is malformed
        """
        level = AccessLevel.parse(access_level)
        fields = FieldPermissions.from_mapping(field_permissions)

        async with self._session.begin():
            await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            existing = await self._record_access_repository.get(group_id, record)
            grant = RecordAccessGrant(
                group_id=group_id,
                record=record,
                access_level=level,
                field_permissions=fields,
                assigned_by=acting_user_id,
            )
            await self._record_access_repository.save(grant)
            await self._audit.log_audit(
                action=AuditAction.RECORD_ACCESS_GRANTED,
                target_type=AuditTargetType.RECORD_ACCESS,
                target_id=record.key,
                before=existing.snapshot() if existing else {},
                after=grant.snapshot(),
                group_id=group_id,
                actor_id=acting_user_id,
            )

        await self._invalidate_record(record)
        self._probe.record_access_granted(
            group_id=group_id.value, record_key=record.key, access_level=level.value
        )
        return grant

    async def revoke_record_access(
        self,
        group_id: GroupId,
        record: RecordRef,
        acting_user_id: UserId,
    ) -> bool:
        """Remove the grant a group holds on a record.

        Revoking a grant that does not exist is a no-op and is not audited.

        Returns:
            True if a grant was removed, False if there was none
        """
        async with self._session.begin():
            await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            existing = await self._record_access_repository.get(group_id, record)
            if existing is None:
                return False

            await self._record_access_repository.delete(group_id, record)
            await self._audit.log_audit(
                action=AuditAction.RECORD_ACCESS_REVOKED,
                target_type=AuditTargetType.RECORD_ACCESS,
                target_id=record.key,
                before=existing.snapshot(),
                after={},
                group_id=group_id,
                actor_id=acting_user_id,
            )

        await self._invalidate_record(record)
        self._probe.record_access_revoked(group_id=group_id.value, record_key=record.key)
        return True

    async def list_grants_for_group(self, group_id: GroupId) -> list[RecordAccessGrant]:
        """List every grant held by a group.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
        """
        await require_scoped_group(
            self._group_repository, group_id, self._scope_to_tenant
        )
        return await self._record_access_repository.list_for_group(group_id)

    async def list_grants_for_record(self, record: RecordRef) -> list[RecordAccessGrant]:
        """List the grants the tenant's groups hold on a record."""
        groups = await self._group_repository.list_by_tenant(self._scope_to_tenant)
        return await self._record_access_repository.list_for_record(
            record, group_ids=[g.id for g in groups]
        )
