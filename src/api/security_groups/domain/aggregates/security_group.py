"""SecurityGroup aggregate for the Security Groups context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Mapping

from security_groups.domain.value_objects import (
    GroupId,
    MassAssignmentSettings,
    TenantId,
)

# Attributes callers may change through update(); parent_id is handled by
# the hierarchy so that levels stay derived.
UPDATABLE_ATTRIBUTES = frozenset(
    {
        "name",
        "description",
        "inherit_permissions",
        "mass_assignment_settings",
        "record_level_permissions",
        "active",
        "sort_order",
    }
)


@dataclass
class SecurityGroup:
    """A named node in a tenant's permission hierarchy.

    Users join groups through memberships, and groups hold record-level
    grants. Groups form a forest per tenant via ``parent_id``.

    Business rules:
    - Names must be 1-255 characters
    - ``level`` is derived from the parent chain and is never set directly
      by callers (the hierarchy recomputes it on reparent)
    - A group with ``inherit_permissions`` exposes its ancestors' grants
      to its members
    """

    id: GroupId
    tenant_id: TenantId
    name: str
    parent_id: GroupId | None = None
    level: int = 0
    description: str | None = None
    inherit_permissions: bool = True
    mass_assignment_settings: MassAssignmentSettings | None = None
    record_level_permissions: dict[str, Any] = field(default_factory=dict)
    active: bool = True
    sort_order: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self._validate_name(self.name)

    @staticmethod
    def _validate_name(name: str) -> None:
        if not isinstance(name, str) or not name.strip() or len(name) > 255:
            raise ValueError("Group name must be between 1 and 255 characters")

    @classmethod
    def create(
        cls,
        name: str,
        tenant_id: TenantId,
        parent: SecurityGroup | None = None,
        **attributes: Any,
    ) -> SecurityGroup:
        """Factory method for creating a new group.

        Args:
            name: The group name (1-255 characters)
            tenant_id: The tenant this group belongs to
            parent: Parent group, or None for a root group
            **attributes: Any of the updatable attributes

        Returns:
            A new SecurityGroup with a generated id and derived level

        Raises:
            ValueError: If the name or an attribute is invalid
        """
        group = cls(
            id=GroupId.generate(),
            tenant_id=tenant_id,
            name=name,
            parent_id=parent.id if parent else None,
            level=parent.level + 1 if parent else 0,
        )
        group.apply(attributes)
        return group

    def apply(self, attributes: Mapping[str, Any]) -> dict[str, tuple[Any, Any]]:
        """Apply attribute changes and return the changed fields.

        Returns:
            Mapping of attribute name to ``(old, new)`` JSON-compatible values
            for every attribute whose value actually changed

        Raises:
            ValueError: If an attribute is unknown or has an invalid value
        """
        unknown = set(attributes) - UPDATABLE_ATTRIBUTES
        if unknown:
            raise ValueError(f"Unknown group attributes: {', '.join(sorted(unknown))}")

        changes: dict[str, tuple[Any, Any]] = {}
        for name, value in attributes.items():
            value = self._coerce(name, value)
            old = getattr(self, name)
            if old != value:
                changes[name] = (_json_value(old), _json_value(value))
                setattr(self, name, value)

        if changes:
            self.updated_at = datetime.now(UTC)
        return changes

    def _coerce(self, name: str, value: Any) -> Any:
        if name == "name":
            self._validate_name(value)
            return value
        if name in ("inherit_permissions", "active"):
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be a boolean")
            return value
        if name == "sort_order":
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError("sort_order must be an integer")
            return value
        if name == "mass_assignment_settings":
            return MassAssignmentSettings.from_mapping(value)
        if name == "record_level_permissions":
            if value is None:
                return {}
            if not isinstance(value, Mapping):
                raise ValueError("record_level_permissions must be a mapping")
            return dict(value)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"{name} must be a string")
        return value

    def move_under(self, parent: SecurityGroup | None) -> None:
        """Attach this group to ``parent`` (or make it a root).

        Only the parent link and this group's level change here; the
        hierarchy is responsible for validating the move and relevelling
        descendants.
        """
        self.parent_id = parent.id if parent else None
        self.level = parent.level + 1 if parent else 0
        self.updated_at = datetime.now(UTC)

    @property
    def is_root(self) -> bool:
        """Check whether this group has no parent."""
        return self.parent_id is None

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-compatible snapshot of the group's state."""
        return {
            "id": self.id.value,
            "tenant_id": self.tenant_id.value,
            "name": self.name,
            "description": self.description,
            "parent_id": self.parent_id.value if self.parent_id else None,
            "level": self.level,
            "inherit_permissions": self.inherit_permissions,
            "mass_assignment_settings": _json_value(self.mass_assignment_settings),
            "record_level_permissions": dict(self.record_level_permissions),
            "active": self.active,
            "sort_order": self.sort_order,
        }


def _json_value(value: Any) -> Any:
    if isinstance(value, MassAssignmentSettings):
        return value.to_dict()
    if isinstance(value, GroupId):
        return value.value
    if isinstance(value, dict):
        return dict(value)
    return value
