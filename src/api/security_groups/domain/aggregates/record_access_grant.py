"""RecordAccessGrant entity for the Security Groups context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from security_groups.domain.value_objects import (
    AccessLevel,
    FieldPermissions,
    GroupId,
    RecordRef,
    UserId,
)


@dataclass
class RecordAccessGrant:
    """Access a group holds on a single record.

    Identity is the ``(group_id, record)`` pair. A non-empty
    ``field_permissions`` map narrows what the access level covers for
    field-scoped checks.
    """

    group_id: GroupId
    record: RecordRef
    access_level: AccessLevel = AccessLevel.READ
    field_permissions: FieldPermissions = field(default_factory=FieldPermissions)
    assigned_by: UserId | None = None
    assigned_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the grant."""
        return {
            "group_id": self.group_id.value,
            "record_type": self.record.record_type,
            "record_id": self.record.record_id,
            "access_level": self.access_level.value,
            "field_permissions": self.field_permissions.to_dict(),
        }
