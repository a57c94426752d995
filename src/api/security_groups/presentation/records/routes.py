"""HTTP routes for record access grants held by security groups."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from security_groups.application.services import RecordAccessService
from security_groups.application.value_objects import CurrentActor
from security_groups.dependencies.actor import get_current_actor
from security_groups.dependencies.services import get_record_access_service
from security_groups.domain.value_objects import RecordRef
from security_groups.presentation.errors import parse_group_id, to_http_exception
from security_groups.presentation.records.models import (
    GrantRecordAccessRequest,
    RecordAccessResponse,
)

router = APIRouter(tags=["security-group-records"])


def _parse_record(record_type: str, record_id: str) -> RecordRef:
    try:
        return RecordRef(record_type=record_type, record_id=record_id)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{group_id}/records", response_model=list[RecordAccessResponse])
async def list_group_records(
    group_id: str,
    service: Annotated[RecordAccessService, Depends(get_record_access_service)],
) -> list[RecordAccessResponse]:
    """List the record grants a group holds directly."""
    group_id_obj = parse_group_id(group_id)
    try:
        grants = await service.list_grants_for_group(group_id_obj)
    except Exception as e:
        raise to_http_exception(e, "Failed to list record grants") from e
    return [RecordAccessResponse.from_domain(grant) for grant in grants]


@router.put("/{group_id}/records/{record_type}/{record_id}")
async def grant_record_access(
    group_id: str,
    record_type: str,
    record_id: str,
    request: GrantRecordAccessRequest,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[RecordAccessService, Depends(get_record_access_service)],
) -> RecordAccessResponse:
    """Create or replace the group's grant on a record.

    ``admin`` and ``owner`` are accepted as aliases of ``full``.
    """
    group_id_obj = parse_group_id(group_id)
    record = _parse_record(record_type, record_id)
    try:
        grant = await service.grant_record_access(
            group_id_obj,
            record,
            actor.user_id,
            access_level=request.access_level,
            field_permissions=request.field_permissions,
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to grant record access") from e
    return RecordAccessResponse.from_domain(grant)


@router.delete(
    "/{group_id}/records/{record_type}/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def revoke_record_access(
    group_id: str,
    record_type: str,
    record_id: str,
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[RecordAccessService, Depends(get_record_access_service)],
) -> None:
    group_id_obj = parse_group_id(group_id)
    record = _parse_record(record_type, record_id)
    try:
        revoked = await service.revoke_record_access(
            group_id_obj, record, actor.user_id
        )
    except Exception as e:
        raise to_http_exception(e, "Failed to revoke record access") from e
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Group {group_id} holds no grant on {record.key}",
        )
