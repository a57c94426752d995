"""PostgreSQL implementation of ISecurityGroupRepository.

The repository only stages changes on the caller's session (add, execute,
flush); the application service owns the transaction.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import (
    GroupId,
    MassAssignmentSettings,
    TenantId,
)
from security_groups.infrastructure.models import (
    GroupMembershipModel,
    RecordAccessModel,
    SecurityGroupModel,
)
from security_groups.infrastructure.observability import (
    DefaultSecurityGroupRepositoryProbe,
    SecurityGroupRepositoryProbe,
)
from security_groups.ports.repositories import ISecurityGroupRepository


class SecurityGroupRepository(ISecurityGroupRepository):
    """Repository for SecurityGroup aggregates stored in PostgreSQL."""

    def __init__(
        self,
        session: AsyncSession,
        probe: SecurityGroupRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultSecurityGroupRepositoryProbe()

    async def save(self, group: SecurityGroup) -> None:
        """Insert or update a group row."""
        stmt = select(SecurityGroupModel).where(SecurityGroupModel.id == group.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = SecurityGroupModel(id=group.id.value, tenant_id=group.tenant_id.value)
            self._session.add(model)

        model.name = group.name
        model.description = group.description
        model.parent_id = group.parent_id.value if group.parent_id else None
        model.level = group.level
        model.inherit_permissions = group.inherit_permissions
        model.mass_assignment_settings = (
            group.mass_assignment_settings.to_dict()
            if group.mass_assignment_settings
            else None
        )
        model.record_level_permissions = dict(group.record_level_permissions)
        model.active = group.active
        model.sort_order = group.sort_order

        # Flush so parent rows exist before children reference them
        await self._session.flush()
        self._probe.group_saved(group.id.value, group.tenant_id.value)

    async def save_all(self, groups: Iterable[SecurityGroup]) -> None:
        """Insert or update several groups in order."""
        for group in groups:
            await self.save(group)

    async def get_by_id(self, group_id: GroupId) -> SecurityGroup | None:
        """Fetch a group by id, regardless of tenant."""
        stmt = select(SecurityGroupModel).where(SecurityGroupModel.id == group_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.group_not_found(group_id.value)
            return None
        return self._to_domain(model)

    async def list_by_tenant(self, tenant_id: TenantId) -> list[SecurityGroup]:
        """List every group of a tenant ordered by level, then name."""
        stmt = (
            select(SecurityGroupModel)
            .where(SecurityGroupModel.tenant_id == tenant_id.value)
            .order_by(SecurityGroupModel.level, SecurityGroupModel.name)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def delete(self, group: SecurityGroup) -> bool:
        """Delete a group row together with its grants and memberships.

        Children must already have been re-parented; the parent foreign key
        rejects the delete otherwise.

        Returns:
            True if deleted, False if not found
        """
        stmt = select(SecurityGroupModel).where(SecurityGroupModel.id == group.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return False

        grants = await self._session.execute(
            delete(RecordAccessModel).where(RecordAccessModel.group_id == group.id.value)
        )
        memberships = await self._session.execute(
            delete(GroupMembershipModel).where(
                GroupMembershipModel.group_id == group.id.value
            )
        )
        await self._session.delete(model)
        await self._session.flush()

        self._probe.group_deleted(
            group.id.value,
            grants_removed=grants.rowcount or 0,
            memberships_removed=memberships.rowcount or 0,
        )
        return True

    @staticmethod
    def _to_domain(model: SecurityGroupModel) -> SecurityGroup:
        return SecurityGroup(
            id=GroupId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            name=model.name,
            parent_id=GroupId(value=model.parent_id) if model.parent_id else None,
            level=model.level,
            description=model.description,
            inherit_permissions=model.inherit_permissions,
            mass_assignment_settings=MassAssignmentSettings.from_mapping(
                model.mass_assignment_settings
            ),
            record_level_permissions=dict(model.record_level_permissions or {}),
            active=model.active,
            sort_order=model.sort_order,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
