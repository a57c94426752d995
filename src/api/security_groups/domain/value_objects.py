"""Value objects for the Security Groups domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers, access tiers and attribute maps.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping

from ulid import ULID

_MAX_OPAQUE_ID_LENGTH = 255


def _validate_opaque_id(kind: str, value: Any) -> str:
    """Validate an identifier supplied by an external system."""
    if not isinstance(value, str):
        raise TypeError(f"{kind} must be str, got {type(value).__name__}")
    value = value.strip()
    if not value:
        raise ValueError(f"{kind} cannot be empty")
    if len(value) > _MAX_OPAQUE_ID_LENGTH:
        raise ValueError(
            f"{kind} must be at most {_MAX_OPAQUE_ID_LENGTH} characters"
        )
    return value


@dataclass(frozen=True)
class GroupId:
    """Identifier for a SecurityGroup aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> GroupId:
        """Generate a new GroupId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> GroupId:
        """Create GroupId from string value.

        Args:
            value: ULID string

        Returns:
            GroupId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid GroupId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class TenantId:
    """Identifier for the tenant (team) that owns a group hierarchy.

    Tenants are managed by the identity provider, so the value is opaque.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from an externally supplied string.

        Raises:
            ValueError: If value is empty or too long
        """
        return cls(value=_validate_opaque_id("TenantId", value))


@dataclass(frozen=True)
class UserId:
    """Identifier for a user supplied by the identity provider."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from an externally supplied string.

        Raises:
            ValueError: If value is empty or too long
        """
        return cls(value=_validate_opaque_id("UserId", value))


@dataclass(frozen=True)
class RecordRef:
    """Identity of a protected record owned by another system.

    The engine never checks that the record exists; it only uses the
    (record_type, record_id) pair as a key.
    """

    record_type: str
    record_id: str

    def __post_init__(self) -> None:
        _validate_opaque_id("record_type", self.record_type)
        _validate_opaque_id("record_id", self.record_id)

    @property
    def key(self) -> str:
        """Return the composite record key."""
        return f"{self.record_type}:{self.record_id}"

    def __str__(self) -> str:
        return self.key


class AccessLevel(StrEnum):
    """Ordered access tiers for record grants.

    ``none < read < write < full``; a higher tier implies every lower one.
    """

    NONE = "none"
    READ = "read"
    WRITE = "write"
    FULL = "full"

    @property
    def rank(self) -> int:
        """Position of this tier in the ordering."""
        return _ACCESS_LEVEL_ORDER.index(self)

    def implies(self, other: AccessLevel) -> bool:
        """Check whether this tier covers ``other``."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: str | AccessLevel) -> AccessLevel:
        """Parse an access level, accepting the legacy ``admin``/``owner`` names.

        Raises:
            ValueError: If value is not a known access level
        """
        if isinstance(value, AccessLevel):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid access level: {value!r}")
        normalized = value.strip().lower()
        if normalized in _LEGACY_FULL_LEVELS:
            return cls.FULL
        try:
            return cls(normalized)
        except ValueError as e:
            raise ValueError(f"Invalid access level: {value!r}") from e


_ACCESS_LEVEL_ORDER = (
    AccessLevel.NONE,
    AccessLevel.READ,
    AccessLevel.WRITE,
    AccessLevel.FULL,
)
_LEGACY_FULL_LEVELS = frozenset({"admin", "owner"})


class RecordAction(StrEnum):
    """Actions a user may attempt on a record."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"

    @property
    def required_level(self) -> AccessLevel:
        """Lowest access tier that allows this action."""
        return _REQUIRED_LEVELS[self]

    @classmethod
    def parse(cls, value: str | RecordAction) -> RecordAction:
        """Parse an action name, accepting common aliases.

        Raises:
            ValueError: If value is not a known action
        """
        if isinstance(value, RecordAction):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid record action: {value!r}")
        normalized = value.strip().lower()
        normalized = _ACTION_ALIASES.get(normalized, normalized)
        try:
            return cls(normalized)
        except ValueError as e:
            raise ValueError(f"Invalid record action: {value!r}") from e


_REQUIRED_LEVELS = {
    RecordAction.READ: AccessLevel.READ,
    RecordAction.WRITE: AccessLevel.WRITE,
    RecordAction.DELETE: AccessLevel.FULL,
}
_ACTION_ALIASES = {
    "view": "read",
    "update": "write",
    "edit": "write",
}


class FieldOperation(StrEnum):
    """Operations that can be allowed on a single field."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class FieldPermissions:
    """Field-level restrictions attached to a grant.

    Maps a field name to the operations allowed on it. An empty map means
    the grant is not field-restricted.
    """

    fields: Mapping[str, frozenset[FieldOperation]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.fields)

    def allows(self, field_name: str, operation: FieldOperation) -> bool:
        """Check whether ``operation`` is allowed on ``field_name``."""
        return operation in self.fields.get(field_name, frozenset())

    def to_dict(self) -> dict[str, list[str]]:
        """Return a JSON-compatible representation."""
        return {
            name: sorted(op.value for op in ops) for name, ops in self.fields.items()
        }

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> FieldPermissions:
        """Build field permissions from a loosely-typed mapping.

        Each value may be a single operation string (``"read"``,
        ``"read,write"``) or a list/tuple/set of operation strings.

        Raises:
            ValueError: If the mapping has an unsupported shape
        """
        if raw is None:
            return cls()
        if isinstance(raw, FieldPermissions):
            return raw
        if not isinstance(raw, Mapping):
            raise ValueError("Field permissions must be a mapping of field to operations")

        parsed: dict[str, frozenset[FieldOperation]] = {}
        for name, ops in raw.items():
            if not isinstance(name, str) or not name.strip():
                raise ValueError("Field permission keys must be non-empty strings")
            if isinstance(ops, str):
                tokens = [token for token in ops.split(",") if token.strip()]
            elif isinstance(ops, (list, tuple, set, frozenset)):
                tokens = list(ops)
            else:
                raise ValueError(
                    f"Operations for field '{name}' must be a string or a list"
                )
            try:
                parsed[name.strip()] = frozenset(
                    FieldOperation(str(token).strip().lower()) for token in tokens
                )
            except ValueError as e:
                raise ValueError(
                    f"Invalid operation for field '{name}': {ops!r}"
                ) from e
        return cls(fields=parsed)


_KNOWN_MEMBERSHIP_FLAGS = (
    "is_owner",
    "is_admin",
    "can_manage_members",
    "can_assign_records",
    "inherit_from_parent",
)


@dataclass(frozen=True)
class MembershipAttributes:
    """Per-membership attribute map.

    Known keys are typed; anything else is carried through untouched in
    ``extra`` so callers can attach their own delegated-authority flags.
    """

    is_owner: bool = False
    is_admin: bool = False
    can_manage_members: bool = False
    can_assign_records: bool = False
    inherit_from_parent: bool = True
    permission_overrides: Mapping[str, Any] = field(default_factory=dict)
    notes: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> MembershipAttributes:
        """Build attributes from a loosely-typed mapping.

        Raises:
            ValueError: If a known key carries a value of the wrong type
        """
        if raw is None:
            return cls()
        if isinstance(raw, MembershipAttributes):
            return raw
        values: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in raw.items():
            if key in _KNOWN_MEMBERSHIP_FLAGS:
                if not isinstance(value, bool):
                    raise ValueError(f"Membership attribute '{key}' must be a boolean")
                values[key] = value
            elif key == "permission_overrides":
                if value is None:
                    value = {}
                if not isinstance(value, Mapping):
                    raise ValueError("permission_overrides must be a mapping")
                values[key] = dict(value)
            elif key == "notes":
                if value is not None and not isinstance(value, str):
                    raise ValueError("notes must be a string")
                values[key] = value
            else:
                extra[key] = value
        return cls(**values, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        """Return a flat, JSON-compatible representation."""
        data: dict[str, Any] = {
            "is_owner": self.is_owner,
            "is_admin": self.is_admin,
            "can_manage_members": self.can_manage_members,
            "can_assign_records": self.can_assign_records,
            "inherit_from_parent": self.inherit_from_parent,
            "permission_overrides": dict(self.permission_overrides),
            "notes": self.notes,
        }
        data.update(self.extra)
        return data

    def diff(self, other: MembershipAttributes) -> tuple[dict[str, Any], dict[str, Any]]:
        """Return ``(before, after)`` restricted to keys whose value changed."""
        mine = self.to_dict()
        theirs = other.to_dict()
        before: dict[str, Any] = {}
        after: dict[str, Any] = {}
        for key in mine.keys() | theirs.keys():
            if mine.get(key) != theirs.get(key):
                before[key] = mine.get(key)
                after[key] = theirs.get(key)
        return before, after


@dataclass(frozen=True)
class MassAssignmentSettings:
    """Default grant template a group applies to batches of records."""

    auto_assign: bool = False
    default_access_level: AccessLevel = AccessLevel.READ
    field_permissions: FieldPermissions = field(default_factory=FieldPermissions)

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, Any] | None
    ) -> MassAssignmentSettings | None:
        """Build settings from a loosely-typed mapping.

        Returns None when no settings are configured.

        Raises:
            ValueError: If a value has the wrong type or an unknown access level
        """
        if raw is None:
            return None
        if isinstance(raw, MassAssignmentSettings):
            return raw
        if not isinstance(raw, Mapping):
            raise ValueError("Mass assignment settings must be a mapping")
        auto_assign = raw.get("auto_assign", False)
        if not isinstance(auto_assign, bool):
            raise ValueError("auto_assign must be a boolean")
        return cls(
            auto_assign=auto_assign,
            default_access_level=AccessLevel.parse(
                raw.get("default_access_level", AccessLevel.READ)
            ),
            field_permissions=FieldPermissions.from_mapping(
                raw.get("field_permissions")
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation."""
        return {
            "auto_assign": self.auto_assign,
            "default_access_level": self.default_access_level.value,
            "field_permissions": self.field_permissions.to_dict(),
        }
