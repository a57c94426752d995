"""HTTP routes for permission checks.

These routes are read-only and run on the read session.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from security_groups.application.services import PermissionResolver
from security_groups.dependencies.services import get_permission_resolver
from security_groups.domain.value_objects import RecordAction, RecordRef
from security_groups.presentation.access.models import (
    AccessCheckResponse,
    EffectiveGroupsResponse,
    EffectivePermissionsResponse,
)
from security_groups.presentation.errors import parse_user_id, to_http_exception
from security_groups.presentation.groups.models import SecurityGroupResponse

router = APIRouter(tags=["security-group-access"])


@router.get("/access-checks")
async def check_record_access(
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    user_id: Annotated[str, Query(min_length=1)],
    record_type: Annotated[str, Query(min_length=1)],
    record_id: Annotated[str, Query(min_length=1)],
    action: str = "read",
    field: str | None = None,
) -> AccessCheckResponse:
    """Check whether a user may perform an action on a record.

    A denied check is a normal response with ``allowed`` false.

    Raises:
        HTTPException: 400 if the action or record reference is invalid
    """
    user_id_obj = parse_user_id(user_id)
    try:
        record = RecordRef(record_type=record_type, record_id=record_id)
        parsed_action = RecordAction.parse(action)
        allowed = await resolver.user_has_record_access(
            user_id_obj, record, parsed_action, field
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to check record access") from e
    return AccessCheckResponse(
        user_id=user_id_obj.value,
        record_type=record.record_type,
        record_id=record.record_id,
        action=parsed_action.value,
        field=field,
        allowed=allowed,
    )


@router.get("/users/{user_id}/effective-permissions")
async def get_effective_permissions(
    user_id: str,
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
) -> EffectivePermissionsResponse:
    """Return the deep-merged permission map of the user's effective groups."""
    user_id_obj = parse_user_id(user_id)
    try:
        permissions = await resolver.get_user_effective_permissions(user_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to resolve permissions") from e
    return EffectivePermissionsResponse(
        user_id=user_id_obj.value, permissions=permissions
    )


@router.get("/users/{user_id}/effective-groups")
async def get_effective_groups(
    user_id: str,
    resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
) -> EffectiveGroupsResponse:
    user_id_obj = parse_user_id(user_id)
    try:
        groups = await resolver.effective_groups_for(user_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to resolve effective groups") from e
    return EffectiveGroupsResponse(
        user_id=user_id_obj.value,
        groups=[SecurityGroupResponse.from_domain(group) for group in groups],
    )
