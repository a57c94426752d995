"""PostgreSQL implementation of IAuditLogRepository (append-only)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.domain.aggregates import AuditAction, AuditEntry, AuditTargetType
from security_groups.domain.value_objects import GroupId, TenantId, UserId
from security_groups.infrastructure.models import AuditLogModel
from security_groups.ports.repositories import IAuditLogRepository


class AuditLogRepository(IAuditLogRepository):
    """Stores audit entries; rows are never updated or deleted."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entry: AuditEntry) -> None:
        """Stage the entry and flush so write failures surface immediately."""
        self._session.add(
            AuditLogModel(
                id=entry.id,
                tenant_id=entry.tenant_id.value,
                group_id=entry.group_id.value if entry.group_id else None,
                actor_id=entry.actor_id.value if entry.actor_id else None,
                action=entry.action.value,
                target_type=entry.target_type.value,
                target_id=entry.target_id,
                before=entry.before,
                after=entry.after,
                occurred_at=entry.occurred_at,
            )
        )
        await self._session.flush()

    async def list_entries(
        self,
        tenant_id: TenantId,
        group_id: GroupId | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        stmt = select(AuditLogModel).where(AuditLogModel.tenant_id == tenant_id.value)
        if group_id is not None:
            stmt = stmt.where(AuditLogModel.group_id == group_id.value)
        stmt = stmt.order_by(
            AuditLogModel.occurred_at.desc(), AuditLogModel.id.desc()
        ).limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: AuditLogModel) -> AuditEntry:
        return AuditEntry(
            id=model.id,
            tenant_id=TenantId(value=model.tenant_id),
            group_id=GroupId(value=model.group_id) if model.group_id else None,
            actor_id=UserId(value=model.actor_id) if model.actor_id else None,
            action=AuditAction(model.action),
            target_type=AuditTargetType(model.target_type),
            target_id=model.target_id,
            before=model.before,
            after=model.after,
            occurred_at=model.occurred_at,
        )
