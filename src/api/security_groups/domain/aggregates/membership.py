"""GroupMembership entity for the Security Groups context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from security_groups.domain.value_objects import GroupId, MembershipAttributes, UserId


@dataclass
class GroupMembership:
    """Relates one user to one security group.

    Identity is the ``(group_id, user_id)`` pair; there is at most one
    membership per pair. Attribute changes update the membership in place.
    """

    group_id: GroupId
    user_id: UserId
    attributes: MembershipAttributes = field(default_factory=MembershipAttributes)
    joined_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    added_by: UserId | None = None

    def replace_attributes(
        self, attributes: MembershipAttributes
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Replace the attribute map and return the ``(before, after)`` diff."""
        before, after = self.attributes.diff(attributes)
        self.attributes = attributes
        return before, after

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the membership."""
        return {
            "group_id": self.group_id.value,
            "user_id": self.user_id.value,
            "attributes": self.attributes.to_dict(),
        }
