"""Application-layer value objects for the Security Groups bounded context.

These represent request context and portable documents rather than core
business entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from security_groups.domain.value_objects import TenantId, UserId

CONFIGURATION_FORMAT_VERSION = 1


@dataclass(frozen=True)
class CurrentActor:
    """The caller of a request, scoped to a tenant.

    Identities are opaque ids supplied by the external identity provider.
    """

    user_id: UserId
    tenant_id: TenantId


class GrantDocument(BaseModel):
    """A record grant inside an exported configuration."""

    model_config = ConfigDict(extra="forbid")

    record_type: str = Field(..., min_length=1, max_length=255)
    record_id: str = Field(..., min_length=1, max_length=255)
    access_level: str = "read"
    field_permissions: dict[str, list[str]] = Field(default_factory=dict)


class GroupDocument(BaseModel):
    """A security group inside an exported configuration.

    ``id`` and ``parent_id`` only relate groups within one document; an
    import assigns fresh ids.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    parent_id: str | None = None
    description: str | None = None
    inherit_permissions: bool = True
    mass_assignment_settings: dict[str, Any] | None = None
    record_level_permissions: dict[str, Any] = Field(default_factory=dict)
    active: bool = True
    sort_order: int = 0
    grants: list[GrantDocument] = Field(default_factory=list)


class TenantConfiguration(BaseModel):
    """Portable group hierarchy, settings and grants of one tenant.

    Memberships and audit history are not part of the document.
    """

    model_config = ConfigDict(extra="forbid")

    format_version: int = CONFIGURATION_FORMAT_VERSION
    tenant_id: str
    exported_at: datetime
    groups: list[GroupDocument] = Field(default_factory=list)
