"""Audit trail for Security Groups mutations.

Entries are staged on the caller's session so that they commit or roll
back together with the mutation they describe.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from security_groups.application.observability import (
    AuditTrailProbe,
    DefaultAuditTrailProbe,
)
from security_groups.domain.aggregates import AuditAction, AuditEntry, AuditTargetType
from security_groups.domain.value_objects import GroupId, TenantId, UserId
from security_groups.ports.exceptions import AuditWriteError
from security_groups.ports.repositories import IAuditLogRepository


class AuditTrail:
    """Append-only audit log scoped to a tenant."""

    def __init__(
        self,
        audit_repository: IAuditLogRepository,
        scope_to_tenant: TenantId,
        probe: AuditTrailProbe | None = None,
    ):
        self._audit_repository = audit_repository
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultAuditTrailProbe()

    async def log_audit(
        self,
        action: AuditAction,
        target_type: AuditTargetType,
        target_id: str | None,
        before: dict[str, Any],
        after: dict[str, Any],
        group_id: GroupId | None = None,
        actor_id: UserId | None = None,
    ) -> AuditEntry:
        """Append an audit entry inside the current transaction.

        Must be called within the mutating service's ``session.begin()``
        block.

        Raises:
            AuditWriteError: If the entry cannot be written; the enclosing
                transaction then rolls back
        """
        entry = AuditEntry(
            tenant_id=self._scope_to_tenant,
            action=action,
            target_type=target_type,
            target_id=target_id,
            before=before,
            after=after,
            group_id=group_id,
            actor_id=actor_id,
        )
        try:
            await self._audit_repository.append(entry)
        except SQLAlchemyError as e:
            self._probe.audit_write_failed(
                action=action.value, target_id=target_id, error=str(e)
            )
            raise AuditWriteError(
                f"Failed to write audit entry for {action.value}: {e}"
            ) from e

        self._probe.audit_logged(
            entry_id=entry.id, action=action.value, target_id=target_id
        )
        return entry

    async def list_entries(
        self, group_id: GroupId | None = None, limit: int = 100
    ) -> list[AuditEntry]:
        """List audit entries for the tenant, newest first."""
        return await self._audit_repository.list_entries(
            tenant_id=self._scope_to_tenant, group_id=group_id, limit=limit
        )
