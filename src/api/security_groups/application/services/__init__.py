"""Application services for the Security Groups bounded context.

Application services orchestrate domain aggregates, repositories, the
audit trail and the permission cache to fulfill use cases. They are the
"front door" to the Security Groups context.
"""

from security_groups.application.services.configuration_service import (
    ConfigurationService,
)
from security_groups.application.services.group_hierarchy_service import (
    GroupHierarchyService,
)
from security_groups.application.services.mass_assignment_service import (
    MassAssignmentService,
)
from security_groups.application.services.membership_service import (
    MembershipService,
)
from security_groups.application.services.permission_resolver import (
    PermissionResolver,
)
from security_groups.application.services.record_access_service import (
    RecordAccessService,
)

__all__ = [
    "ConfigurationService",
    "GroupHierarchyService",
    "MassAssignmentService",
    "MembershipService",
    "PermissionResolver",
    "RecordAccessService",
]
