"""Security Groups presentation layer - aggregate-based organization.

Each aggregate package contains its own routes and models. Routers with
fixed paths are included before the groups router so that they are not
shadowed by ``/{group_id}``.
"""

from __future__ import annotations

from fastapi import APIRouter

from security_groups.presentation import access, configuration, groups, members, records

router = APIRouter(
    prefix="/security-groups",
    tags=["security-groups"],
)

router.include_router(access.router)
router.include_router(configuration.router)
router.include_router(groups.router)
router.include_router(members.router)
router.include_router(records.router)

__all__ = ["router"]
