"""Pydantic models for security group API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from security_groups.domain.aggregates import AuditEntry, SecurityGroup
from security_groups.domain.hierarchy import HierarchyNode
from security_groups.domain.value_objects import RecordRef


class MassAssignmentSettingsModel(BaseModel):
    """Default grant template applied by mass assignment."""

    auto_assign: bool = Field(default=False, description="Create grants on apply")
    default_access_level: str = Field(
        default="read", description="Access level of created grants"
    )
    field_permissions: dict[str, list[str]] = Field(
        default_factory=dict, description="Field restrictions of created grants"
    )


class CreateSecurityGroupRequest(BaseModel):
    """Request model for creating a security group.

    Tenant ID comes from the caller's identity headers.
    """

    name: str = Field(..., description="Group name", min_length=1, max_length=255)
    parent_id: str | None = Field(default=None, description="Parent group ID")
    description: str | None = Field(default=None, description="Group description")
    inherit_permissions: bool = Field(
        default=True, description="Expose ancestors' grants to members"
    )
    mass_assignment_settings: MassAssignmentSettingsModel | None = None
    record_level_permissions: dict[str, Any] = Field(default_factory=dict)
    active: bool = True
    sort_order: int = 0

    def attributes(self) -> dict[str, Any]:
        """Return the group attributes other than name and parent."""
        return self.model_dump(exclude={"name", "parent_id"})


class UpdateSecurityGroupRequest(BaseModel):
    """Request model for a partial group update.

    Only fields present in the request body are changed. Setting
    ``parent_id`` moves the group (null makes it a root).
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    parent_id: str | None = None
    description: str | None = None
    inherit_permissions: bool | None = None
    mass_assignment_settings: MassAssignmentSettingsModel | None = None
    record_level_permissions: dict[str, Any] | None = None
    active: bool | None = None
    sort_order: int | None = None


class ReparentSecurityGroupRequest(BaseModel):
    """Request model for moving a group under a new parent."""

    parent_id: str | None = Field(
        ..., description="New parent group ID, or null to make the group a root"
    )


class SecurityGroupResponse(BaseModel):
    """Response model for a security group."""

    id: str = Field(..., description="Group ID (ULID format)")
    tenant_id: str
    name: str
    description: str | None
    parent_id: str | None
    level: int = Field(..., description="Depth in the hierarchy (roots are 0)")
    inherit_permissions: bool
    mass_assignment_settings: MassAssignmentSettingsModel | None
    record_level_permissions: dict[str, Any]
    active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, group: SecurityGroup) -> SecurityGroupResponse:
        """Convert domain SecurityGroup aggregate to API response."""
        settings = group.mass_assignment_settings
        return cls(
            id=group.id.value,
            tenant_id=group.tenant_id.value,
            name=group.name,
            description=group.description,
            parent_id=group.parent_id.value if group.parent_id else None,
            level=group.level,
            inherit_permissions=group.inherit_permissions,
            mass_assignment_settings=(
                MassAssignmentSettingsModel(**settings.to_dict()) if settings else None
            ),
            record_level_permissions=dict(group.record_level_permissions),
            active=group.active,
            sort_order=group.sort_order,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class HierarchyNodeResponse(BaseModel):
    """One group in a tenant hierarchy listing."""

    group_id: str
    name: str
    parent_id: str | None
    level: int
    inherit_permissions: bool
    sort_order: int
    child_ids: list[str]

    @classmethod
    def from_domain(cls, node: HierarchyNode) -> HierarchyNodeResponse:
        return cls(**node.to_dict())


class RecordRefModel(BaseModel):
    """Reference to a record owned by another system."""

    record_type: str = Field(..., min_length=1, max_length=255)
    record_id: str = Field(..., min_length=1, max_length=255)

    def to_domain(self) -> RecordRef:
        return RecordRef(record_type=self.record_type, record_id=self.record_id)


class MassAssignmentRequest(BaseModel):
    """Request model for applying a group's mass-assignment template."""

    records: list[RecordRefModel] = Field(..., description="Records to assign")


class MassAssignmentResponse(BaseModel):
    """Result of a mass-assignment run."""

    group_id: str
    records_count: int = Field(..., description="Distinct records in the batch")
    grants_applied: int = Field(..., description="Grants created or replaced")


class AuditEntryResponse(BaseModel):
    """Response model for an audit trail entry."""

    id: str
    action: str
    target_type: str
    target_id: str | None
    group_id: str | None
    actor_id: str | None
    before: dict[str, Any]
    after: dict[str, Any]
    occurred_at: datetime

    @classmethod
    def from_domain(cls, entry: AuditEntry) -> AuditEntryResponse:
        """Convert domain AuditEntry to API response."""
        return cls(
            id=entry.id,
            action=entry.action.value,
            target_type=entry.target_type.value,
            target_id=entry.target_id,
            group_id=entry.group_id.value if entry.group_id else None,
            actor_id=entry.actor_id.value if entry.actor_id else None,
            before=entry.before,
            after=entry.after,
            occurred_at=entry.occurred_at,
        )
