"""Rules deciding whether a record grant allows an action."""

from __future__ import annotations

from security_groups.domain.aggregates import RecordAccessGrant
from security_groups.domain.value_objects import (
    AccessLevel,
    FieldOperation,
    RecordAction,
)


def allows_action(
    grant: RecordAccessGrant,
    action: RecordAction | str,
    field: str | None = None,
) -> bool:
    """Check whether ``grant`` allows ``action`` on its record.

    Tiers are strictly ordered: ``none`` allows nothing, ``read`` allows
    reads, ``write`` adds updates and ``full`` adds deletes. For a
    field-scoped check against a grant with a field map, the field must be
    listed with the matching operation (deletes need ``write`` on the field).

    Raises:
        ValueError: If ``action`` is not a known action
    """
    action = RecordAction.parse(action)
    if grant.access_level == AccessLevel.NONE:
        return False
    if not grant.access_level.implies(action.required_level):
        return False
    if field is not None and grant.field_permissions:
        operation = (
            FieldOperation.READ if action == RecordAction.READ else FieldOperation.WRITE
        )
        return grant.field_permissions.allows(field, operation)
    return True
