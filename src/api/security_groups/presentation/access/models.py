"""Pydantic models for permission checks."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from security_groups.presentation.groups.models import SecurityGroupResponse


class AccessCheckResponse(BaseModel):
    """Result of a record access check."""

    user_id: str
    record_type: str
    record_id: str
    action: str
    field: str | None = None
    allowed: bool = Field(..., description="Whether any effective group grants it")


class EffectivePermissionsResponse(BaseModel):
    """Merged permission map of a user's effective groups."""

    user_id: str
    permissions: dict[str, Any]


class EffectiveGroupsResponse(BaseModel):
    """Direct groups of a user plus the ancestors they inherit from."""

    user_id: str
    groups: list[SecurityGroupResponse]
