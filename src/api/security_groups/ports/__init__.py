"""Ports for the Security Groups bounded context."""

from security_groups.ports.cache import PermissionCache
from security_groups.ports.repositories import (
    IAuditLogRepository,
    IMembershipRepository,
    IRecordAccessRepository,
    ISecurityGroupRepository,
)

__all__ = [
    "IAuditLogRepository",
    "IMembershipRepository",
    "IRecordAccessRepository",
    "ISecurityGroupRepository",
    "PermissionCache",
]
