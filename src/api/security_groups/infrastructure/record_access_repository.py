"""PostgreSQL implementation of IRecordAccessRepository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.domain.aggregates import RecordAccessGrant
from security_groups.domain.value_objects import (
    AccessLevel,
    FieldPermissions,
    GroupId,
    RecordRef,
    UserId,
)
from security_groups.infrastructure.models import RecordAccessModel
from security_groups.infrastructure.observability import (
    AccessRepositoryProbe,
    DefaultAccessRepositoryProbe,
)
from security_groups.ports.repositories import IRecordAccessRepository


class RecordAccessRepository(IRecordAccessRepository):
    """Repository for record grants keyed by (group, record)."""

    def __init__(
        self,
        session: AsyncSession,
        probe: AccessRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultAccessRepositoryProbe()

    async def _get_model(
        self, group_id: GroupId, record: RecordRef
    ) -> RecordAccessModel | None:
        stmt = (
            select(RecordAccessModel)
            .where(
                RecordAccessModel.group_id == group_id.value,
                RecordAccessModel.record_type == record.record_type,
                RecordAccessModel.record_id == record.record_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, group_id: GroupId, record: RecordRef) -> RecordAccessGrant | None:
        model = await self._get_model(group_id, record)
        return self._to_domain(model) if model else None

    async def save(self, grant: RecordAccessGrant) -> None:
        """Insert the grant or replace the existing grant on the same record.

        A single INSERT ... ON CONFLICT, so concurrent grants of the same
        (group, record) pair both succeed.
        """
        values = {
            "access_level": grant.access_level.value,
            "field_permissions": grant.field_permissions.to_dict(),
            "assigned_by": grant.assigned_by.value if grant.assigned_by else None,
            "assigned_at": grant.assigned_at,
        }
        stmt = insert(RecordAccessModel).values(
            group_id=grant.group_id.value,
            record_type=grant.record.record_type,
            record_id=grant.record.record_id,
            **values,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                RecordAccessModel.group_id,
                RecordAccessModel.record_type,
                RecordAccessModel.record_id,
            ],
            set_={name: stmt.excluded[name] for name in values},
        )
        await self._session.execute(stmt)
        self._probe.grant_saved(grant.group_id.value, grant.record.key)

    async def delete(self, group_id: GroupId, record: RecordRef) -> bool:
        result = await self._session.execute(
            delete(RecordAccessModel).where(
                RecordAccessModel.group_id == group_id.value,
                RecordAccessModel.record_type == record.record_type,
                RecordAccessModel.record_id == record.record_id,
            )
        )
        deleted = bool(result.rowcount)
        if deleted:
            self._probe.grant_deleted(group_id.value, record.key)
        return deleted

    async def list_for_group(self, group_id: GroupId) -> list[RecordAccessGrant]:
        stmt = (
            select(RecordAccessModel)
            .where(RecordAccessModel.group_id == group_id.value)
            .order_by(RecordAccessModel.record_type, RecordAccessModel.record_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_for_record(
        self, record: RecordRef, group_ids: Iterable[GroupId] | None = None
    ) -> list[RecordAccessGrant]:
        stmt = select(RecordAccessModel).where(
            RecordAccessModel.record_type == record.record_type,
            RecordAccessModel.record_id == record.record_id,
        )
        if group_ids is not None:
            ids = [group_id.value for group_id in group_ids]
            if not ids:
                return []
            stmt = stmt.where(RecordAccessModel.group_id.in_(ids))
        result = await self._session.execute(stmt.order_by(RecordAccessModel.group_id))
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: RecordAccessModel) -> RecordAccessGrant:
        return RecordAccessGrant(
            group_id=GroupId(value=model.group_id),
            record=RecordRef(record_type=model.record_type, record_id=model.record_id),
            access_level=AccessLevel.parse(model.access_level),
            field_permissions=FieldPermissions.from_mapping(model.field_permissions),
            assigned_by=UserId(value=model.assigned_by) if model.assigned_by else None,
            assigned_at=model.assigned_at,
        )
