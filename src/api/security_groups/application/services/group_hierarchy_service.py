"""Group hierarchy application service for the Security Groups context.

Owns the per-tenant forest of security groups: creation, attribute updates,
reparenting with cycle prevention and deletion that keeps the tree connected.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultHierarchyServiceProbe,
    HierarchyServiceProbe,
)
from security_groups.application.services.group_lookup import get_scoped_group
from security_groups.domain.aggregates import (
    AuditAction,
    AuditTargetType,
    SecurityGroup,
)
from security_groups.domain.hierarchy import GroupHierarchy, HierarchyNode
from security_groups.domain.value_objects import GroupId, TenantId, UserId
from security_groups.ports.exceptions import (
    CrossTenantParentError,
    HierarchyCycleError,
    SecurityGroupNotFoundError,
)
from security_groups.ports.repositories import ISecurityGroupRepository


class GroupHierarchyService:
    """Application service for the security group hierarchy.

    Every mutation runs in a single transaction together with its audit
    entry; the tenant's cached data is invalidated only after commit.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: ISecurityGroupRepository,
        audit_trail: AuditTrail,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: HierarchyServiceProbe | None = None,
    ):
        """Initialize GroupHierarchyService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            audit_trail: Audit trail sharing the same session
            cache: Permission cache coordinator
            scope_to_tenant: A tenant to which this service will be scoped.
            probe: Optional domain probe for observability
        """
        self._session = session
        self._group_repository = group_repository
        self._audit = audit_trail
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultHierarchyServiceProbe()

    async def _load_hierarchy(self) -> GroupHierarchy:
        groups = await self._group_repository.list_by_tenant(self._scope_to_tenant)
        return GroupHierarchy(groups)

    async def _resolve_parent(
        self, hierarchy: GroupHierarchy, parent_id: GroupId
    ) -> SecurityGroup:
        """Find a prospective parent inside the scoped tenant.

        Raises:
            CrossTenantParentError: If the parent belongs to another tenant
            SecurityGroupNotFoundError: If the parent does not exist
        """
        parent = hierarchy.get(parent_id)
        if parent is not None:
            return parent
        if await self._group_repository.get_by_id(parent_id) is not None:
            raise CrossTenantParentError(
                f"Parent group {parent_id.value} belongs to another tenant"
            )
        raise SecurityGroupNotFoundError(f"Parent group {parent_id.value} not found")

    async def _invalidate_tenant(self) -> None:
        await self._cache.invalidate(self._cache.tenant_scope(self._scope_to_tenant))

    async def create_group(
        self,
        name: str,
        acting_user_id: UserId,
        parent_id: GroupId | None = None,
        **attributes: Any,
    ) -> SecurityGroup:
        """Create a new group, optionally under a parent.

        Args:
            name: Group name
            acting_user_id: User performing the change (recorded in the audit)
            parent_id: Parent group, or None to create a root group
            **attributes: Any updatable group attribute

        Returns:
            The created SecurityGroup

        Raises:
            ValueError: If the name or an attribute is invalid
            CrossTenantParentError: If the parent is in another tenant
            SecurityGroupNotFoundError: If the parent does not exist
        """
        try:
            async with self._session.begin():
                parent = None
                if parent_id is not None:
                    hierarchy = await self._load_hierarchy()
                    parent = await self._resolve_parent(hierarchy, parent_id)

                group = SecurityGroup.create(
                    name=name,
                    tenant_id=self._scope_to_tenant,
                    parent=parent,
                    **attributes,
                )
                await self._group_repository.save(group)
                await self._audit.log_audit(
                    action=AuditAction.CREATED,
                    target_type=AuditTargetType.GROUP,
                    target_id=group.id.value,
                    before={},
                    after=group.snapshot(),
                    group_id=group.id,
                    actor_id=acting_user_id,
                )
        except Exception as e:
            self._probe.group_creation_failed(
                name=name,
                tenant_id=self._scope_to_tenant.value,
                error=str(e),
            )
            raise

        await self._invalidate_tenant()
        self._probe.group_created(
            group_id=group.id.value,
            name=group.name,
            tenant_id=self._scope_to_tenant.value,
            parent_id=parent_id.value if parent_id else None,
        )
        return group

    async def update_group(
        self,
        group_id: GroupId,
        acting_user_id: UserId,
        **attributes: Any,
    ) -> SecurityGroup:
        """Update group attributes, including an optional ``parent_id`` move.

        A move is validated before anything is written. When the group moves,
        the levels of its whole subtree are recomputed. Only changed fields
        are recorded in the audit entry; an update that changes nothing is
        not audited.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
            HierarchyCycleError: If the new parent is the group or a descendant
            CrossTenantParentError: If the new parent is in another tenant
            ValueError: If an attribute is unknown or invalid
        """
        move_requested = "parent_id" in attributes
        new_parent_id: GroupId | None = attributes.pop("parent_id", None)

        try:
            async with self._session.begin():
                hierarchy = await self._load_hierarchy()
                group = hierarchy.get(group_id)
                if group is None:
                    raise SecurityGroupNotFoundError(
                        f"Security group {group_id.value} not found"
                    )

                current_parent = group.parent_id
                moving = move_requested and new_parent_id != current_parent
                if moving:
                    if new_parent_id is not None:
                        await self._resolve_parent(hierarchy, new_parent_id)
                    if not hierarchy.validate_hierarchy(group_id, new_parent_id):
                        self._probe.group_reparent_rejected(
                            group_id=group_id.value,
                            candidate_parent_id=new_parent_id.value,
                            reason="would create cycle",
                        )
                        raise HierarchyCycleError(group_id.value, new_parent_id.value)

                old_level = group.level
                changes = group.apply(attributes)
                touched = [group]
                if moving:
                    touched = hierarchy.move(group_id, new_parent_id)
                    changes["parent_id"] = (
                        current_parent.value if current_parent else None,
                        new_parent_id.value if new_parent_id else None,
                    )
                    if group.level != old_level:
                        changes["level"] = (old_level, group.level)

                if not changes:
                    return group

                await self._group_repository.save_all(touched)
                await self._audit.log_audit(
                    action=AuditAction.UPDATED,
                    target_type=AuditTargetType.GROUP,
                    target_id=group.id.value,
                    before={name: old for name, (old, _) in changes.items()},
                    after={name: new for name, (_, new) in changes.items()},
                    group_id=group.id,
                    actor_id=acting_user_id,
                )
        except Exception as e:
            self._probe.group_update_failed(
                group_id=group_id.value,
                tenant_id=self._scope_to_tenant.value,
                error=str(e),
            )
            raise

        await self._invalidate_tenant()
        self._probe.group_updated(
            group_id=group.id.value,
            tenant_id=self._scope_to_tenant.value,
            changed_fields=sorted(changes),
        )
        return group

    async def reparent_group(
        self,
        group_id: GroupId,
        new_parent_id: GroupId | None,
        acting_user_id: UserId,
    ) -> SecurityGroup:
        """Move a group under a new parent (None makes it a root).

        The move is validated with ``validate_hierarchy`` first and rejected
        with HierarchyCycleError if invalid; an invalid move is never
        corrected silently.
        """
        return await self.update_group(
            group_id, acting_user_id, parent_id=new_parent_id
        )

    async def delete_group(self, group_id: GroupId, acting_user_id: UserId) -> bool:
        """Delete a group, attaching its children to its parent.

        Children of a root group become roots. The group's grants and
        memberships are removed in the same transaction.

        Returns:
            True if deleted, False if the group does not exist in the tenant
        """
        try:
            async with self._session.begin():
                hierarchy = await self._load_hierarchy()
                group = hierarchy.get(group_id)
                if group is None:
                    return False

                snapshot = group.snapshot()
                children_count = len(hierarchy.children(group_id))
                # Children must point at the grandparent before the group goes away
                reparented = hierarchy.detach(group_id)
                if reparented:
                    await self._group_repository.save_all(reparented)
                await self._group_repository.delete(group)
                await self._audit.log_audit(
                    action=AuditAction.DELETED,
                    target_type=AuditTargetType.GROUP,
                    target_id=group_id.value,
                    before=snapshot,
                    after={},
                    group_id=group_id,
                    actor_id=acting_user_id,
                )
        except Exception as e:
            self._probe.group_deletion_failed(
                group_id=group_id.value,
                tenant_id=self._scope_to_tenant.value,
                error=str(e),
            )
            raise

        await self._invalidate_tenant()
        self._probe.group_deleted(
            group_id=group_id.value,
            tenant_id=self._scope_to_tenant.value,
            reparented_children=children_count,
        )
        return True

    async def validate_hierarchy(
        self, group_id: GroupId, candidate_parent_id: GroupId | None
    ) -> bool:
        """Check whether ``candidate_parent_id`` is an acceptable parent.

        Returns False if the candidate is the group itself or one of its
        descendants; True for None (root) or any other id. Does not mutate.
        """
        hierarchy = await self._load_hierarchy()
        return hierarchy.validate_hierarchy(group_id, candidate_parent_id)

    async def ancestors(self, group_id: GroupId) -> list[SecurityGroup]:
        """Return the group's ancestors, root first.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
            HierarchyConsistencyError: If stored parent links form a cycle
        """
        hierarchy = await self._load_hierarchy()
        if group_id not in hierarchy:
            raise SecurityGroupNotFoundError(f"Security group {group_id.value} not found")
        return hierarchy.ancestors(group_id)

    async def descendants(self, group_id: GroupId) -> list[SecurityGroup]:
        """Return every group below ``group_id``, breadth first.

        Raises:
            SecurityGroupNotFoundError: If the group does not exist in the tenant
        """
        hierarchy = await self._load_hierarchy()
        if group_id not in hierarchy:
            raise SecurityGroupNotFoundError(f"Security group {group_id.value} not found")
        return hierarchy.descendants(group_id)

    async def hierarchy_for_tenant(self) -> list[HierarchyNode]:
        """Return the tenant's active groups ordered by level, then name."""
        key = self._cache.hierarchy_key(self._scope_to_tenant)
        cached = await self._cache.get(key)
        if cached is not None:
            return [HierarchyNode.from_dict(node) for node in cached]

        hierarchy = await self._load_hierarchy()
        nodes = hierarchy.forest(active_only=True)
        await self._cache.set(
            key,
            [node.to_dict() for node in nodes],
            ttl_seconds=self._cache.group_ttl_seconds,
            scopes=[self._cache.tenant_scope(self._scope_to_tenant)],
        )
        return nodes

    async def get_group(self, group_id: GroupId) -> SecurityGroup | None:
        """Get a group of the scoped tenant, or None."""
        return await get_scoped_group(
            self._group_repository, group_id, self._scope_to_tenant
        )

    async def list_groups(self) -> list[SecurityGroup]:
        """List every group of the tenant (active or not)."""
        groups = await self._group_repository.list_by_tenant(self._scope_to_tenant)
        return sorted(groups, key=lambda g: (g.level, g.sort_order, g.name))
