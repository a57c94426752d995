"""Caller identity for Security Groups routes.

Identities are issued by the external identity provider; the gateway in
front of this service forwards them as ``X-User-Id`` and ``X-Tenant-Id``.
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from security_groups.application.value_objects import CurrentActor
from security_groups.domain.value_objects import TenantId, UserId
from shared_kernel.observability_context import ObservationContext


def get_current_actor(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
    x_tenant_id: Annotated[str | None, Header(alias="X-Tenant-Id")] = None,
) -> CurrentActor:
    """Resolve the calling user and tenant from request headers.

    Raises:
        HTTPException: 401 if either header is missing or malformed
    """
    if not x_user_id or not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id and X-Tenant-Id headers are required",
        )
    try:
        return CurrentActor(
            user_id=UserId.from_string(x_user_id),
            tenant_id=TenantId.from_string(x_tenant_id),
        )
    except (TypeError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid identity headers: {e}",
        ) from e


def observation_context_for(actor: CurrentActor) -> ObservationContext:
    """Build the observation context bound to every probe of a request."""
    return ObservationContext(
        user_id=actor.user_id.value,
        tenant_id=actor.tenant_id.value,
    )
