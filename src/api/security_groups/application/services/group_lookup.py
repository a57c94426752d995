"""Tenant-scoped group lookup shared by the application services."""

from __future__ import annotations

from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import GroupId, TenantId
from security_groups.ports.exceptions import SecurityGroupNotFoundError
from security_groups.ports.repositories import ISecurityGroupRepository


async def get_scoped_group(
    group_repository: ISecurityGroupRepository,
    group_id: GroupId,
    tenant_id: TenantId,
) -> SecurityGroup | None:
    """Load a group, returning None if it belongs to another tenant."""
    group = await group_repository.get_by_id(group_id)
    if group is None:
        return None

    # Don't leak existence of groups in other tenants
    if group.tenant_id != tenant_id:
        return None
    return group


async def require_scoped_group(
    group_repository: ISecurityGroupRepository,
    group_id: GroupId,
    tenant_id: TenantId,
) -> SecurityGroup:
    """Load a group of the tenant or raise SecurityGroupNotFoundError."""
    group = await get_scoped_group(group_repository, group_id, tenant_id)
    if group is None:
        raise SecurityGroupNotFoundError(f"Security group {group_id.value} not found")
    return group
