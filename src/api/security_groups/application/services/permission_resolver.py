"""Permission resolver for the Security Groups context.

Read-only computation of a user's effective groups, record access
decisions and merged permission map, memoized through the cache
coordinator.
"""

from __future__ import annotations

from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultPermissionResolverProbe,
    PermissionResolverProbe,
)
from security_groups.domain.access import allows_action
from security_groups.domain.aggregates import GroupMembership, SecurityGroup
from security_groups.domain.hierarchy import GroupHierarchy
from security_groups.domain.permissions import deep_merge, group_effective_permissions
from security_groups.domain.value_objects import (
    GroupId,
    RecordAction,
    RecordRef,
    TenantId,
    UserId,
)
from security_groups.ports.repositories import (
    IMembershipRepository,
    IRecordAccessRepository,
    ISecurityGroupRepository,
)


class PermissionResolver:
    """Resolves what a user may do, using one inheritance rule.

    A user's effective groups are the groups they belong to directly plus,
    for every direct group with ``inherit_permissions``, that group's whole
    ancestor chain. Access checks and permission maps are both computed from
    this set, so inherited grants are found by a single pass over it.

    Checks are allow-if-any-group-grants; group order never changes an
    allow/deny answer.
    """

    def __init__(
        self,
        group_repository: ISecurityGroupRepository,
        membership_repository: IMembershipRepository,
        record_access_repository: IRecordAccessRepository,
        cache: PermissionCacheCoordinator,
        scope_to_tenant: TenantId,
        probe: PermissionResolverProbe | None = None,
    ):
        self._group_repository = group_repository
        self._membership_repository = membership_repository
        self._record_access_repository = record_access_repository
        self._cache = cache
        self._scope_to_tenant = scope_to_tenant
        self._probe = probe or DefaultPermissionResolverProbe()

    def _user_scopes(self, user_id: UserId) -> list[str]:
        return [
            self._cache.tenant_scope(self._scope_to_tenant),
            self._cache.user_scope(self._scope_to_tenant, user_id),
        ]

    async def _resolve(
        self, user_id: UserId
    ) -> tuple[list[SecurityGroup], dict[str, GroupMembership], GroupHierarchy]:
        """Compute effective groups from the store.

        Each direct group is preceded by its ancestors (root first) when it
        inherits; a group reached through several paths appears once, at
        its first occurrence.
        """
        memberships = await self._membership_repository.list_for_user(
            user_id, self._scope_to_tenant
        )
        hierarchy = GroupHierarchy(
            await self._group_repository.list_by_tenant(self._scope_to_tenant)
        )

        effective: list[SecurityGroup] = []
        seen: set[str] = set()
        for membership in memberships:
            group = hierarchy.get(membership.group_id)
            if group is None:
                continue
            chain = hierarchy.ancestors(group.id) if group.inherit_permissions else []
            for candidate in [*chain, group]:
                if candidate.id.value not in seen:
                    seen.add(candidate.id.value)
                    effective.append(candidate)

        direct = {m.group_id.value: m for m in memberships}
        return effective, direct, hierarchy

    async def _effective_group_ids(self, user_id: UserId) -> list[str]:
        key = self._cache.effective_groups_key(self._scope_to_tenant, user_id)
        cached = await self._cache.get(key)
        if cached is not None:
            self._probe.effective_groups_resolved(
                user_id=user_id.value, group_count=len(cached), cached=True
            )
            return list(cached)

        groups, _, _ = await self._resolve(user_id)
        group_ids = [g.id.value for g in groups]
        await self._cache.set(
            key,
            group_ids,
            ttl_seconds=self._cache.group_ttl_seconds,
            scopes=self._user_scopes(user_id),
        )
        self._probe.effective_groups_resolved(
            user_id=user_id.value, group_count=len(group_ids), cached=False
        )
        return group_ids

    async def effective_groups_for(self, user_id: UserId) -> list[SecurityGroup]:
        """Return the user's direct groups plus inherited ancestors.

        De-duplicated by group id; a user who belongs to both a group and
        one of its ancestors sees that ancestor once.
        """
        group_ids = await self._effective_group_ids(user_id)
        groups = {
            g.id.value: g
            for g in await self._group_repository.list_by_tenant(self._scope_to_tenant)
        }
        return [groups[group_id] for group_id in group_ids if group_id in groups]

    async def user_has_record_access(
        self,
        user_id: UserId,
        record: RecordRef,
        action: RecordAction | str = RecordAction.READ,
        field: str | None = None,
    ) -> bool:
        """Check whether the user may perform ``action`` on ``record``.

        Denial is a False result, never an exception.

        Raises:
            ValueError: If ``action`` is not a known action
        """
        action = RecordAction.parse(action)
        key = self._cache.access_key(
            self._scope_to_tenant, user_id, record, action, field
        )
        cached = await self._cache.get(key)
        if cached is not None:
            self._probe.access_check_cache_hit(
                user_id=user_id.value, record_key=record.key, action=action.value
            )
            return bool(cached)

        group_ids = await self._effective_group_ids(user_id)
        allowed = False
        if group_ids:
            grants = await self._record_access_repository.list_for_record(
                record, group_ids=[GroupId(value=group_id) for group_id in group_ids]
            )
            allowed = any(allows_action(grant, action, field) for grant in grants)

        await self._cache.set(
            key,
            allowed,
            ttl_seconds=self._cache.decision_ttl_seconds,
            scopes=[
                *self._user_scopes(user_id),
                self._cache.record_scope(self._scope_to_tenant, record),
            ],
        )
        self._probe.access_checked(
            user_id=user_id.value,
            record_key=record.key,
            action=action.value,
            allowed=allowed,
            groups_considered=len(group_ids),
        )
        return allowed

    async def get_user_effective_permissions(self, user_id: UserId) -> dict:
        """Return the deep-merged permission map of all effective groups.

        Later groups merge over earlier ones: nested maps merge key by key
        and other conflicting values are kept side by side in a list.
        """
        key = self._cache.effective_permissions_key(self._scope_to_tenant, user_id)
        cached = await self._cache.get(key)
        if cached is not None:
            self._probe.effective_permissions_resolved(
                user_id=user_id.value, key_count=len(cached), cached=True
            )
            return cached

        groups, direct, hierarchy = await self._resolve(user_id)
        permissions: dict = {}
        for group in groups:
            membership = direct.get(group.id.value)
            rollup = group_effective_permissions(
                group,
                hierarchy.ancestors(group.id),
                membership.attributes if membership else None,
            )
            permissions = deep_merge(permissions, rollup)

        await self._cache.set(
            key,
            permissions,
            ttl_seconds=self._cache.group_ttl_seconds,
            scopes=self._user_scopes(user_id),
        )
        self._probe.effective_permissions_resolved(
            user_id=user_id.value, key_count=len(permissions), cached=False
        )
        return permissions
