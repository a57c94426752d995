"""Domain aggregates for the Security Groups context.

Aggregates and entities carry state and enforce invariants without
depending on infrastructure.
"""

from security_groups.domain.aggregates.audit_entry import (
    AuditAction,
    AuditEntry,
    AuditTargetType,
)
from security_groups.domain.aggregates.membership import GroupMembership
from security_groups.domain.aggregates.record_access_grant import RecordAccessGrant
from security_groups.domain.aggregates.security_group import SecurityGroup

__all__ = [
    "AuditAction",
    "AuditEntry",
    "AuditTargetType",
    "GroupMembership",
    "RecordAccessGrant",
    "SecurityGroup",
]
