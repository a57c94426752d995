"""Membership registry application service for the Security Groups context."""

from __future__ import annotations

from typing import Any, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)
from security_groups.application.services.group_lookup import require_scoped_group
from security_groups.domain.aggregates import (
    AuditAction,
    AuditTargetType,
    GroupMembership,
)
from security_groups.domain.value_objects import (
    GroupId,
    MembershipAttributes,
    TenantId,
    UserId,
)
from security_groups.ports.exceptions import MembershipNotFoundError
from security_groups.ports.repositories import (
    IMembershipRepository,
    ISecurityGroupRepository,
)


class MembershipService:
    """Application service for group memberships.

    Add and remove are idempotent. Every successful change invalidates the
    affected user's cached groups, permissions and decisions after commit.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: ISecurityGroupRepository,
        membership_repository: IMembershipRepository,
        audit_trail: AuditTrail,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: MembershipServiceProbe | None = None,
    ):
        self._session = session
        self._group_repository = group_repository
        self._membership_repository = membership_repository
        self._audit = audit_trail
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultMembershipServiceProbe()

    async def _invalidate_user(self, user_id: UserId) -> None:
        await self._cache.invalidate(
            self._cache.user_scope(self._scope_to_tenant, user_id)
        )

    async def add_member(
        self,
        group_id: GroupId,
        user_id: UserId,
        acting_user_id: UserId,
        attributes: Mapping[str, Any] | None = None,
    ) -> GroupMembership:
        """Add a user to a group, or refresh an existing membership.

        Calling this twice leaves one membership whose attributes are the
        ones passed on the second call.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
            ValueError: If the attributes are malformed
        """
        new_attributes = MembershipAttributes.from_mapping(attributes)

        async with self._session.begin():
            await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            membership = await self._membership_repository.get(group_id, user_id)
            was_member = membership is not None
            if membership is not None:
                before = membership.attributes.to_dict()
                membership.replace_attributes(new_attributes)
            else:
                before = {}
                membership = GroupMembership(
                    group_id=group_id,
                    user_id=user_id,
                    attributes=new_attributes,
                    added_by=acting_user_id,
                )

            await self._membership_repository.save(membership)
            await self._audit.log_audit(
                action=AuditAction.MEMBER_ADDED,
                target_type=AuditTargetType.MEMBERSHIP,
                target_id=user_id.value,
                before=before,
                after=new_attributes.to_dict(),
                group_id=group_id,
                actor_id=acting_user_id,
            )

        await self._invalidate_user(user_id)
        self._probe.member_added(
            group_id=group_id.value, user_id=user_id.value, was_member=was_member
        )
        return membership

    async def remove_member(
        self,
        group_id: GroupId,
        user_id: UserId,
        acting_user_id: UserId,
    ) -> bool:
        """Remove a user from a group.

        Removing a user who is not a member is a no-op and is not audited.

        Returns:
            True if a membership was removed, False if there was none
        """
        async with self._session.begin():
            await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            membership = await self._membership_repository.get(group_id, user_id)
            if membership is None:
                return False

            await self._membership_repository.delete(group_id, user_id)
            await self._audit.log_audit(
                action=AuditAction.MEMBER_REMOVED,
                target_type=AuditTargetType.MEMBERSHIP,
                target_id=user_id.value,
                before=membership.attributes.to_dict(),
                after={},
                group_id=group_id,
                actor_id=acting_user_id,
            )

        await self._invalidate_user(user_id)
        self._probe.member_removed(group_id=group_id.value, user_id=user_id.value)
        return True

    async def update_member_attributes(
        self,
        group_id: GroupId,
        user_id: UserId,
        attributes: Mapping[str, Any],
        acting_user_id: UserId,
    ) -> GroupMembership:
        """Merge ``attributes`` into an existing membership.

        Keys not mentioned keep their values. The audit entry records only
        the keys whose value changed; a call that changes nothing is not
        audited.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
            MembershipNotFoundError: If the user is not a member of the group
            ValueError: If the attributes are malformed
        """
        async with self._session.begin():
            await require_scoped_group(
                self._group_repository, group_id, self._scope_to_tenant
            )
            membership = await self._membership_repository.get(group_id, user_id)
            if membership is None:
                raise MembershipNotFoundError(
                    f"User {user_id.value} is not a member of group {group_id.value}"
                )

            merged = MembershipAttributes.from_mapping(
                {**membership.attributes.to_dict(), **attributes}
            )
            before, after = membership.replace_attributes(merged)
            if not before and not after:
                return membership

            await self._membership_repository.save(membership)
            await self._audit.log_audit(
                action=AuditAction.MEMBER_UPDATED,
                target_type=AuditTargetType.MEMBERSHIP,
                target_id=user_id.value,
                before=before,
                after=after,
                group_id=group_id,
                actor_id=acting_user_id,
            )

        await self._invalidate_user(user_id)
        self._probe.member_updated(
            group_id=group_id.value,
            user_id=user_id.value,
            changed_attributes=sorted(after),
        )
        return membership

    async def list_members(self, group_id: GroupId) -> list[GroupMembership]:
        """List the memberships of a group.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
        """
        await require_scoped_group(
            self._group_repository, group_id, self._scope_to_tenant
        )
        return await self._membership_repository.list_for_group(group_id)
