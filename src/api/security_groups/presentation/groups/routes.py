"""HTTP routes for security group hierarchy management."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.services import (
    GroupHierarchyService,
    MassAssignmentService,
)
from security_groups.application.value_objects import CurrentActor
from security_groups.dependencies.actor import get_current_actor
from security_groups.dependencies.repositories import get_audit_trail
from security_groups.dependencies.services import (
    get_group_hierarchy_service,
    get_mass_assignment_service,
)
from security_groups.presentation.errors import parse_group_id, to_http_exception
from security_groups.presentation.groups.models import (
    AuditEntryResponse,
    CreateSecurityGroupRequest,
    HierarchyNodeResponse,
    MassAssignmentRequest,
    MassAssignmentResponse,
    ReparentSecurityGroupRequest,
    SecurityGroupResponse,
    UpdateSecurityGroupRequest,
)

router = APIRouter(tags=["security-groups"])


@router.get(
    "/hierarchy",
    response_model=list[HierarchyNodeResponse],
    summary="Get tenant hierarchy",
    description="Active groups of the caller's tenant ordered by level, then name",
)
async def get_hierarchy(
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> list[HierarchyNodeResponse]:
    try:
        nodes = await service.hierarchy_for_tenant()
    except Exception as e:
        raise to_http_exception(e, "Failed to load hierarchy") from e
    return [HierarchyNodeResponse.from_domain(node) for node in nodes]


@router.get(
    "",
    response_model=list[SecurityGroupResponse],
    summary="List security groups",
)
async def list_groups(
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> list[SecurityGroupResponse]:
    """List every group in the caller's tenant, including inactive ones."""
    try:
        groups = await service.list_groups()
    except Exception as e:
        raise to_http_exception(e, "Failed to list security groups") from e
    return [SecurityGroupResponse.from_domain(group) for group in groups]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Group created"},
        400: {"description": "Invalid group attributes or parent in another tenant"},
        404: {"description": "Parent group not found"},
        503: {"description": "Audit trail unavailable"},
    },
)
async def create_group(
    request: CreateSecurityGroupRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> SecurityGroupResponse:
    """Create a security group, optionally under a parent.

    Args:
        request: Group name, parent and attributes
        actor: The caller, recorded as the audit actor
        service: Hierarchy service scoped to the caller's tenant

    Returns:
        SecurityGroupResponse with the derived level

    Raises:
        HTTPException: 400 if attributes are invalid or the parent is in
            another tenant
        HTTPException: 404 if the parent does not exist
    """
    parent_id = parse_group_id(request.parent_id) if request.parent_id else None
    try:
        group = await service.create_group(
            request.name,
            actor.user_id,
            parent_id=parent_id,
            **request.attributes(),
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to create security group") from e
    return SecurityGroupResponse.from_domain(group)


@router.get("/{group_id}")
async def get_group(
    group_id: str,
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> SecurityGroupResponse:
    """Get a security group by ID."""
    group_id_obj = parse_group_id(group_id)
    try:
        group = await service.get_group(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to get security group") from e
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Security group {group_id} not found",
        )
    return SecurityGroupResponse.from_domain(group)


@router.patch(
    "/{group_id}",
    responses={
        200: {"description": "Group updated"},
        400: {"description": "Invalid attributes"},
        404: {"description": "Group not found"},
        409: {"description": "Move would create a cycle"},
    },
)
async def update_group(
    group_id: str,
    request: UpdateSecurityGroupRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> SecurityGroupResponse:
    """Update the fields present in the request body.

    Only changed fields are audited; a request that changes nothing
    returns the group unchanged.
    """
    group_id_obj = parse_group_id(group_id)
    attributes = request.model_dump(exclude_unset=True)
    if "parent_id" in attributes:
        raw_parent = attributes["parent_id"]
        attributes["parent_id"] = parse_group_id(raw_parent) if raw_parent else None
    try:
        group = await service.update_group(group_id_obj, actor.user_id, **attributes)
    except Exception as e:
        raise to_http_exception(e, "Failed to update security group") from e
    return SecurityGroupResponse.from_domain(group)


@router.put("/{group_id}/parent")
async def reparent_group(
    group_id: str,
    request: ReparentSecurityGroupRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> SecurityGroupResponse:
    """Move a group under a new parent, or make it a root.

    Raises:
        HTTPException: 409 if the new parent is the group or one of its
            descendants
    """
    group_id_obj = parse_group_id(group_id)
    parent_id = parse_group_id(request.parent_id) if request.parent_id else None
    try:
        group = await service.reparent_group(group_id_obj, parent_id, actor.user_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to move security group") from e
    return SecurityGroupResponse.from_domain(group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> None:
    """Delete a group; its children move up to its parent."""
    group_id_obj = parse_group_id(group_id)
    try:
        deleted = await service.delete_group(group_id_obj, actor.user_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to delete security group") from e
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Security group {group_id} not found",
        )


@router.get("/{group_id}/ancestors", response_model=list[SecurityGroupResponse])
async def get_ancestors(
    group_id: str,
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> list[SecurityGroupResponse]:
    """List the group's ancestors, root first."""
    group_id_obj = parse_group_id(group_id)
    try:
        groups = await service.ancestors(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to load ancestors") from e
    return [SecurityGroupResponse.from_domain(group) for group in groups]


@router.get("/{group_id}/descendants", response_model=list[SecurityGroupResponse])
async def get_descendants(
    group_id: str,
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
) -> list[SecurityGroupResponse]:
    group_id_obj = parse_group_id(group_id)
    try:
        groups = await service.descendants(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to load descendants") from e
    return [SecurityGroupResponse.from_domain(group) for group in groups]


@router.post("/{group_id}/mass-assignment")
async def apply_mass_assignment(
    group_id: str,
    request: MassAssignmentRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[MassAssignmentService, Depends(get_mass_assignment_service)],
) -> MassAssignmentResponse:
    """Grant the group's default access on a batch of records.

    Groups without mass-assignment settings apply nothing.
    """
    group_id_obj = parse_group_id(group_id)
    try:
        records = [record.to_domain() for record in request.records]
        applied = await service.apply_mass_assignment_rules(
            group_id_obj, records, actor.user_id
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to apply mass assignment") from e
    return MassAssignmentResponse(
        group_id=group_id,
        records_count=len(set(records)),
        grants_applied=applied,
    )


@router.get("/{group_id}/audit-log", response_model=list[AuditEntryResponse])
async def get_audit_log(
    group_id: str,
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    service: Annotated[GroupHierarchyService, Depends(get_group_hierarchy_service)],
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[AuditEntryResponse]:
    """List audit entries of a group, newest first.

    Entries outlive the group, so a deleted group's history is still
    returned. Only an id with neither a group nor entries is a 404.
    """
    group_id_obj = parse_group_id(group_id)
    try:
        entries = await audit_trail.list_entries(group_id=group_id_obj, limit=limit)
        group = None if entries else await service.get_group(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to load audit log") from e
    if not entries and group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Security group {group_id} not found",
        )
    return [AuditEntryResponse.from_domain(entry) for entry in entries]
