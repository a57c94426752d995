"""HTTP routes for group membership management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from security_groups.application.services import MembershipService
from security_groups.application.value_objects import CurrentActor
from security_groups.dependencies.actor import get_current_actor
from security_groups.dependencies.services import get_membership_service
from security_groups.presentation.errors import (
    parse_group_id,
    parse_user_id,
    to_http_exception,
)
from security_groups.presentation.members.models import (
    AddMemberRequest,
    MembershipResponse,
    UpdateMemberAttributesRequest,
)

router = APIRouter(tags=["security-group-members"])


@router.get("/{group_id}/members", response_model=list[MembershipResponse])
async def list_members(
    group_id: str,
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> list[MembershipResponse]:
    """List the direct members of a group."""
    group_id_obj = parse_group_id(group_id)
    try:
        memberships = await service.list_members(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to list members") from e
    return [MembershipResponse.from_domain(m) for m in memberships]


@router.put("/{group_id}/members/{user_id}")
async def add_member(
    group_id: str,
    user_id: str,
    request: AddMemberRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> MembershipResponse:
    """Add a user to a group.

    Idempotent: repeating the call keeps one membership carrying the
    latest attributes.

    Raises:
        HTTPException: 400 if attributes are malformed
        HTTPException: 404 if the group does not exist
    """
    group_id_obj = parse_group_id(group_id)
    user_id_obj = parse_user_id(user_id)
    try:
        membership = await service.add_member(
            group_id_obj, user_id_obj, actor.user_id, attributes=request.attributes
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to add member") from e
    return MembershipResponse.from_domain(membership)


@router.patch("/{group_id}/members/{user_id}")
async def update_member_attributes(
    group_id: str,
    user_id: str,
    request: UpdateMemberAttributesRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> MembershipResponse:
    """Change attributes of an existing membership."""
    group_id_obj = parse_group_id(group_id)
    user_id_obj = parse_user_id(user_id)
    try:
        membership = await service.update_member_attributes(
            group_id_obj, user_id_obj, request.attributes, actor.user_id
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to update member") from e
    return MembershipResponse.from_domain(membership)


@router.delete(
    "/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_member(
    group_id: str,
    user_id: str,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[MembershipService, Depends(get_membership_service)],
) -> None:
    """Remove a user from a group.

    Raises:
        HTTPException: 404 if the group does not exist or the user is not
            a member
    """
    group_id_obj = parse_group_id(group_id)
    user_id_obj = parse_user_id(user_id)
    try:
        removed = await service.remove_member(group_id_obj, user_id_obj, actor.user_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to remove member") from e
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} is not a member of group {group_id}",
        )
