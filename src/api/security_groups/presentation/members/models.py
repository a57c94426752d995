"""Pydantic models for group membership requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from security_groups.domain.aggregates import GroupMembership


class AddMemberRequest(BaseModel):
    """Request model for adding a user to a group.

    Known attribute keys are ``is_owner``, ``is_admin``,
    ``can_manage_members``, ``can_assign_records``, ``inherit_from_parent``,
    ``permission_overrides`` and ``notes``; other keys are stored as-is.
    """

    attributes: dict[str, Any] = Field(default_factory=dict)


class UpdateMemberAttributesRequest(BaseModel):
    """Request model for changing membership attributes.

    Keys present here replace the stored values; other keys are kept.
    """

    attributes: dict[str, Any] = Field(..., description="Attributes to change")


class MembershipResponse(BaseModel):
    """Response model for a group membership."""

    group_id: str
    user_id: str
    attributes: dict[str, Any]
    joined_at: datetime
    added_by: str | None

    @classmethod
    def from_domain(cls, membership: GroupMembership) -> MembershipResponse:
        return cls(
            group_id=membership.group_id.value,
            user_id=membership.user_id.value,
            attributes=membership.attributes.to_dict(),
            joined_at=membership.joined_at,
            added_by=membership.added_by.value if membership.added_by else None,
        )
