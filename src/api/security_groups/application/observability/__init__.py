"""Domain-Oriented Observability for the Security Groups application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from security_groups.application.observability.audit_trail_probe import (
    AuditTrailProbe,
    DefaultAuditTrailProbe,
)
from security_groups.application.observability.cache_probe import (
    DefaultPermissionCacheProbe,
    PermissionCacheProbe,
)
from security_groups.application.observability.configuration_service_probe import (
    ConfigurationServiceProbe,
    DefaultConfigurationServiceProbe,
)
from security_groups.application.observability.hierarchy_service_probe import (
    DefaultHierarchyServiceProbe,
    HierarchyServiceProbe,
)
from security_groups.application.observability.mass_assignment_service_probe import (
    DefaultMassAssignmentServiceProbe,
    MassAssignmentServiceProbe,
)
from security_groups.application.observability.membership_service_probe import (
    DefaultMembershipServiceProbe,
    MembershipServiceProbe,
)
from security_groups.application.observability.permission_resolver_probe import (
    DefaultPermissionResolverProbe,
    PermissionResolverProbe,
)
from security_groups.application.observability.record_access_service_probe import (
    DefaultRecordAccessServiceProbe,
    RecordAccessServiceProbe,
)

__all__ = [
    "AuditTrailProbe",
    "DefaultAuditTrailProbe",
    "PermissionCacheProbe",
    "DefaultPermissionCacheProbe",
    "ConfigurationServiceProbe",
    "DefaultConfigurationServiceProbe",
    "HierarchyServiceProbe",
    "DefaultHierarchyServiceProbe",
    "MassAssignmentServiceProbe",
    "DefaultMassAssignmentServiceProbe",
    "MembershipServiceProbe",
    "DefaultMembershipServiceProbe",
    "PermissionResolverProbe",
    "DefaultPermissionResolverProbe",
    "RecordAccessServiceProbe",
    "DefaultRecordAccessServiceProbe",
]
