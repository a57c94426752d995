"""Repository protocols (ports) for the Security Groups bounded context.

Repositories only stage changes on the caller's session; the application
services own the transaction boundary so that a mutation, its cascades and
its audit entry commit or roll back together.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from security_groups.domain.aggregates import (
    AuditEntry,
    GroupMembership,
    RecordAccessGrant,
    SecurityGroup,
)
from security_groups.domain.value_objects import GroupId, RecordRef, TenantId, UserId


@runtime_checkable
class ISecurityGroupRepository(Protocol):
    """Repository for SecurityGroup persistence."""

    async def save(self, group: SecurityGroup) -> None:
        """Insert or update a group.

        Args:
            group: The SecurityGroup to persist (includes tenant_id)
        """
        ...

    async def save_all(self, groups: Iterable[SecurityGroup]) -> None:
        """Insert or update several groups (used when a subtree moves)."""
        ...

    async def get_by_id(self, group_id: GroupId) -> SecurityGroup | None:
        """Retrieve a group by id.

        Tenant scoping is the caller's responsibility.

        Returns:
            The group, or None if it does not exist
        """
        ...

    async def list_by_tenant(self, tenant_id: TenantId) -> list[SecurityGroup]:
        """List every group (active or not) of a tenant."""
        ...

    async def delete(self, group: SecurityGroup) -> bool:
        """Delete a group together with its grants and memberships.

        Returns:
            True if deleted, False if not found
        """
        ...


@runtime_checkable
class IMembershipRepository(Protocol):
    """Repository for GroupMembership persistence."""

    async def get(self, group_id: GroupId, user_id: UserId) -> GroupMembership | None:
        """Retrieve the membership for a (group, user) pair."""
        ...

    async def save(self, membership: GroupMembership) -> None:
        """Upsert the membership keyed by (group, user)."""
        ...

    async def delete(self, group_id: GroupId, user_id: UserId) -> bool:
        """Delete a membership.

        Returns:
            True if a row was removed, False if there was none
        """
        ...

    async def list_for_group(self, group_id: GroupId) -> list[GroupMembership]:
        """List the memberships of a group."""
        ...

    async def list_for_user(
        self, user_id: UserId, tenant_id: TenantId
    ) -> list[GroupMembership]:
        """List a user's memberships in groups of one tenant."""
        ...


@runtime_checkable
class IRecordAccessRepository(Protocol):
    """Repository for RecordAccessGrant persistence."""

    async def get(self, group_id: GroupId, record: RecordRef) -> RecordAccessGrant | None:
        """Retrieve the grant for a (group, record) pair."""
        ...

    async def save(self, grant: RecordAccessGrant) -> None:
        """Upsert the grant keyed by (group, record)."""
        ...

    async def delete(self, group_id: GroupId, record: RecordRef) -> bool:
        """Delete a grant.

        Returns:
            True if a row was removed, False if there was none
        """
        ...

    async def list_for_group(self, group_id: GroupId) -> list[RecordAccessGrant]:
        """List every grant held by a group."""
        ...

    async def list_for_record(
        self, record: RecordRef, group_ids: Iterable[GroupId] | None = None
    ) -> list[RecordAccessGrant]:
        """List grants on a record, optionally restricted to some groups."""
        ...


@runtime_checkable
class IAuditLogRepository(Protocol):
    """Append-only store for audit entries."""

    async def append(self, entry: AuditEntry) -> None:
        """Stage an audit entry in the current transaction."""
        ...

    async def list_entries(
        self,
        tenant_id: TenantId,
        group_id: GroupId | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        """List entries newest first, optionally for a single group."""
        ...
