"""HTTP routes for exporting and importing a tenant configuration."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status

from security_groups.application.services import ConfigurationService
from security_groups.application.value_objects import CurrentActor, TenantConfiguration
from security_groups.dependencies.actor import get_current_actor
from security_groups.dependencies.services import get_configuration_service
from security_groups.presentation.configuration.models import (
    ImportConfigurationResponse,
)
from security_groups.presentation.errors import to_http_exception

router = APIRouter(prefix="/configuration", tags=["security-group-configuration"])


@router.get("")
async def export_configuration(
    service: Annotated[ConfigurationService, Depends(get_configuration_service)],
) -> TenantConfiguration:
    """Export the tenant's groups, settings and grants.

    Memberships and audit history are not exported.
    """
    try:
        return await service.export_configuration()
    except Exception as e:
        raise to_http_exception(e, "Failed to export configuration") from e


@router.post("", status_code=status.HTTP_201_CREATED)
async def import_configuration(
    document: Annotated[dict[str, Any], Body(...)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
    service: Annotated[ConfigurationService, Depends(get_configuration_service)],
) -> ImportConfigurationResponse:
    """Import a configuration document into the caller's tenant.

    Groups are created with new IDs; the response maps document IDs to them.

    Raises:
        HTTPException: 400 if the document is malformed
        HTTPException: 409 if parent references form a cycle
    """
    try:
        id_map = await service.import_configuration(document, actor.user_id)
    except Exception as e:
        raise to_http_exception(e, "Failed to import configuration") from e
    return ImportConfigurationResponse(groups_imported=len(id_map), id_map=id_map)
