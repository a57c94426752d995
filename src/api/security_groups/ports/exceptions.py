"""Exceptions for the Security Groups bounded context.

Validation errors subclass ValueError so callers that only care about
"bad input" can catch them uniformly. The application layer raises these;
the presentation layer maps them to HTTP responses.
"""


class SecurityGroupValidationError(ValueError):
    """Raised when a mutation is rejected by a validation rule.

    No partial mutation has happened when this is raised.
    """

    pass


class HierarchyCycleError(SecurityGroupValidationError):
    """Raised when a reparent would make a group its own ancestor."""

    def __init__(self, group_id: str, parent_id: str):
        super().__init__(
            f"Cannot move group {group_id} under {parent_id}: would create cycle"
        )
        self.group_id = group_id
        self.parent_id = parent_id


class CrossTenantParentError(SecurityGroupValidationError):
    """Raised when a group would be attached to a parent in another tenant."""

    pass


class InvalidConfigurationError(SecurityGroupValidationError):
    """Raised when an imported configuration document is inconsistent."""

    pass


class SecurityGroupNotFoundError(Exception):
    """Raised when a group does not exist in the scoped tenant.

    Groups in other tenants are reported as not found so their existence
    is never leaked.
    """

    pass


class MembershipNotFoundError(Exception):
    """Raised when updating a membership that does not exist."""

    pass


class HierarchyConsistencyError(Exception):
    """Raised when stored hierarchy data violates the forest invariant.

    This signals an internal invariant failure (a cycle or a dangling
    parent reference), not a recoverable user error.
    """

    pass


class AuditWriteError(Exception):
    """Raised when an audit entry cannot be written.

    The triggering mutation is rolled back together with the audit write.
    """

    pass


class CacheUnavailableError(Exception):
    """Raised by cache backends when the backing store cannot be reached."""

    pass
