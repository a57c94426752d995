"""Pydantic models for record access grants."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from security_groups.domain.aggregates import RecordAccessGrant


class GrantRecordAccessRequest(BaseModel):
    """Request model for granting a group access to a record."""

    access_level: str = Field(
        default="read", description="One of none, read, write, full"
    )
    field_permissions: dict[str, list[str] | str] = Field(
        default_factory=dict,
        description="Field name to allowed operations (read, write)",
    )


class RecordAccessResponse(BaseModel):
    """Response model for a record access grant."""

    group_id: str
    record_type: str
    record_id: str
    access_level: str
    field_permissions: dict[str, list[str]]
    assigned_by: str | None
    assigned_at: datetime

    @classmethod
    def from_domain(cls, grant: RecordAccessGrant) -> RecordAccessResponse:
        return cls(
            group_id=grant.group_id.value,
            record_type=grant.record.record_type,
            record_id=grant.record.record_id,
            access_level=grant.access_level.value,
            field_permissions=grant.field_permissions.to_dict(),
            assigned_by=grant.assigned_by.value if grant.assigned_by else None,
            assigned_at=grant.assigned_at,
        )
