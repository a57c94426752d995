"""Translation of Security Groups errors into HTTP responses."""

from __future__ import annotations

import structlog
from fastapi import HTTPException, status

from security_groups.domain.value_objects import GroupId, UserId
from security_groups.ports.exceptions import (
    AuditWriteError,
    HierarchyConsistencyError,
    HierarchyCycleError,
    MembershipNotFoundError,
    SecurityGroupNotFoundError,
)

logger = structlog.get_logger()


def to_http_exception(error: Exception, failure: str) -> HTTPException:
    """Map a service error to the HTTPException returned to the caller.

    Args:
        error: The exception raised by the application service
        failure: Detail used for unexpected errors (500)
    """
    if isinstance(error, HierarchyCycleError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, (SecurityGroupNotFoundError, MembershipNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, AuditWriteError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Audit trail unavailable; the change was not applied",
        )
    if isinstance(error, HierarchyConsistencyError):
        logger.error("security_group_hierarchy_inconsistent", error=str(error))
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure
        )
    if isinstance(error, (ValueError, TypeError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))

    logger.exception("security_groups_request_failed", failure=failure)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure
    )


def parse_group_id(value: str) -> GroupId:
    """Parse a group id path parameter.

    Raises:
        HTTPException: 400 if the id is not a valid ULID
    """
    try:
        return GroupId.from_string(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid group ID format: {value}",
        )


def parse_user_id(value: str) -> UserId:
    """Parse a user id path or query parameter.

    Raises:
        HTTPException: 400 if the id is blank or too long
    """
    try:
        return UserId.from_string(value)
    except (TypeError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
