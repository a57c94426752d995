"""Mass-assignment application service for the Security Groups context."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultMassAssignmentServiceProbe,
    MassAssignmentServiceProbe,
)
from security_groups.application.services.group_lookup import require_scoped_group
from security_groups.domain.aggregates import (
    AuditAction,
    AuditTargetType,
    RecordAccessGrant,
)
from security_groups.domain.value_objects import GroupId, RecordRef, TenantId, UserId
from security_groups.ports.repositories import (
    IRecordAccessRepository,
    ISecurityGroupRepository,
)


class MassAssignmentService:
    """Applies a group's default grant template to a batch of records."""

    def __init__(
        self,
        session: AsyncSession,
        group_repository: ISecurityGroupRepository,
        record_access_repository: IRecordAccessRepository,
        audit_trail: AuditTrail,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: MassAssignmentServiceProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._record_access_repository = record_access_repository
        self._audit = audit_trail
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultMassAssignmentServiceProbe()

    async def apply_mass_assignment_rules(
        self,
        group_id: GroupId,
        records: Iterable[RecordRef],
        acting_user_id: UserId,
    ) -> int:
        """Grant the group's default access on every record in ``records``.

        A group without mass-assignment settings is left untouched and no
        audit entry is written. Otherwise a single audit entry summarizes
        the batch, whether or not ``auto_assign`` produced grants.

        Returns:
            Number of grants created or replaced

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
        """
        batch = list(dict.fromkeys(records))

        async with self._session.begin():
            group = await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            settings = group.mass_assignment_settings
            if settings is None:
                self._probe.mass_assignment_skipped(
                    group_id=group_id.value, reason="no mass assignment settings"
                )
                return 0

            applied = 0
            if settings.auto_assign:
                for record in batch:
                    await self._record_access_repository.save(
                        RecordAccessGrant(
                            group_id=group_id,
                            record=record,
                            access_level=settings.default_access_level,
                            field_permissions=settings.field_permissions,
                            assigned_by=acting_user_id,
                        )
                    )
                    applied += 1

            await self._audit.log_audit(
                action=AuditAction.MASS_ASSIGNMENT_APPLIED,
                target_type=AuditTargetType.MASS_ASSIGNMENT,
                target_id=group_id.value,
                before={},
                after={
                    "records_count": len(batch),
                    "grants_applied": applied,
                    "settings": settings.to_dict(),
                },
                group_id=group_id,
                actor_id=acting_user_id,
            )

        if applied:
            await self._cache.invalidate(
                *(self._cache.record_scope(self._scope_to_tenant, r) for r in batch)
            )
        self._probe.mass_assignment_applied(
            group_id=group_id.value, records_count=len(batch), grants_applied=applied
        )
        return applied
