"""SQLAlchemy ORM models for the Security Groups bounded context.

These models map to database tables and are used by repository implementations.
"""

from security_groups.infrastructure.models.audit_log import AuditLogModel
from security_groups.infrastructure.models.membership import GroupMembershipModel
from security_groups.infrastructure.models.record_access import RecordAccessModel
from security_groups.infrastructure.models.security_group import SecurityGroupModel

__all__ = [
    "AuditLogModel",
    "GroupMembershipModel",
    "RecordAccessModel",
    "SecurityGroupModel",
]
