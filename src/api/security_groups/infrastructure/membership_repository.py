"""PostgreSQL implementation of IMembershipRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.domain.aggregates import GroupMembership
from security_groups.domain.value_objects import (
    GroupId,
    MembershipAttributes,
    TenantId,
    UserId,
)
from security_groups.infrastructure.models import (
    GroupMembershipModel,
    SecurityGroupModel,
)
from security_groups.infrastructure.observability import (
    AccessRepositoryProbe,
    DefaultAccessRepositoryProbe,
)
from security_groups.ports.repositories import IMembershipRepository


class MembershipRepository(IMembershipRepository):
    """Repository for group memberships keyed by (group, user)."""

    def __init__(
        self,
        session: AsyncSession,
        probe: AccessRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultAccessRepositoryProbe()

    async def _get_model(
        self, group_id: GroupId, user_id: UserId
    ) -> GroupMembershipModel | None:
        stmt = (
            select(GroupMembershipModel)
            .where(
                GroupMembershipModel.group_id == group_id.value,
                GroupMembershipModel.user_id == user_id.value,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, group_id: GroupId, user_id: UserId) -> GroupMembership | None:
        model = await self._get_model(group_id, user_id)
        return self._to_domain(model) if model else None

    async def save(self, membership: GroupMembership) -> None:
        """Insert the membership or replace the attributes of an existing one.

        A single INSERT ... ON CONFLICT, so concurrent adds of the same
        (group, user) pair both succeed.
        """
        stmt = insert(GroupMembershipModel).values(
            group_id=membership.group_id.value,
            user_id=membership.user_id.value,
            attributes=membership.attributes.to_dict(),
            added_by=membership.added_by.value if membership.added_by else None,
            joined_at=membership.joined_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                GroupMembershipModel.group_id,
                GroupMembershipModel.user_id,
            ],
            set_={"attributes": stmt.excluded["attributes"]},
        )
        await self._session.execute(stmt)
        self._probe.membership_saved(membership.group_id.value, membership.user_id.value)

    async def delete(self, group_id: GroupId, user_id: UserId) -> bool:
        result = await self._session.execute(
            delete(GroupMembershipModel).where(
                GroupMembershipModel.group_id == group_id.value,
                GroupMembershipModel.user_id == user_id.value,
            )
        )
        deleted = bool(result.rowcount)
        if deleted:
            self._probe.membership_deleted(group_id.value, user_id.value)
        return deleted

    async def list_for_group(self, group_id: GroupId) -> list[GroupMembership]:
        stmt = (
            select(GroupMembershipModel)
            .where(GroupMembershipModel.group_id == group_id.value)
            .order_by(GroupMembershipModel.joined_at, GroupMembershipModel.user_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def list_for_user(
        self, user_id: UserId, tenant_id: TenantId
    ) -> list[GroupMembership]:
        stmt = (
            select(GroupMembershipModel)
            .join(
                SecurityGroupModel,
                SecurityGroupModel.id == GroupMembershipModel.group_id,
            )
            .where(
                GroupMembershipModel.user_id == user_id.value,
                SecurityGroupModel.tenant_id == tenant_id.value,
            )
            .order_by(GroupMembershipModel.joined_at, GroupMembershipModel.group_id)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: GroupMembershipModel) -> GroupMembership:
        return GroupMembership(
            group_id=GroupId(value=model.group_id),
            user_id=UserId(value=model.user_id),
            attributes=MembershipAttributes.from_mapping(model.attributes or {}),
            joined_at=model.joined_at,
            added_by=UserId(value=model.added_by) if model.added_by else None,
        )
