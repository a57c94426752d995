"""AuditEntry record for the Security Groups context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from ulid import ULID

from security_groups.domain.value_objects import GroupId, TenantId, UserId


class AuditAction(StrEnum):
    """Mutations recorded in the audit trail."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    MEMBER_UPDATED = "member_updated"
    RECORD_ACCESS_GRANTED = "record_access_granted"
    RECORD_ACCESS_REVOKED = "record_access_revoked"
    MASS_ASSIGNMENT_APPLIED = "mass_assignment_applied"
    CONFIGURATION_IMPORTED = "configuration_imported"


class AuditTargetType(StrEnum):
    """Kinds of objects an audit entry can describe."""

    GROUP = "group"
    MEMBERSHIP = "membership"
    RECORD_ACCESS = "record_access"
    MASS_ASSIGNMENT = "mass_assignment"
    CONFIGURATION = "configuration"


@dataclass(frozen=True)
class AuditEntry:
    """Immutable record of one mutation with before/after snapshots.

    Entries are append-only: once written they are never updated or deleted.
    """

    tenant_id: TenantId
    action: AuditAction
    target_type: AuditTargetType
    target_id: str | None
    before: dict[str, Any]
    after: dict[str, Any]
    group_id: GroupId | None = None
    actor_id: UserId | None = None
    id: str = field(default_factory=lambda: str(ULID()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))
