"""Repository dependency wiring.

Mutating services get repositories on the write session; the permission
resolver gets its own set on the read session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from security_groups.application.audit_trail import AuditTrail
from security_groups.application.observability import DefaultAuditTrailProbe
from security_groups.application.value_objects import CurrentActor
from security_groups.dependencies.actor import (
    get_current_actor,
    observation_context_for,
)
from security_groups.infrastructure.audit_log_repository import AuditLogRepository
from security_groups.infrastructure.group_repository import SecurityGroupRepository
from security_groups.infrastructure.membership_repository import MembershipRepository
from security_groups.infrastructure.record_access_repository import (
    RecordAccessRepository,
)


def get_group_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> SecurityGroupRepository:
    return SecurityGroupRepository(session=session)


def get_membership_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> MembershipRepository:
    return MembershipRepository(session=session)


def get_record_access_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> RecordAccessRepository:
    return RecordAccessRepository(session=session)


def get_read_group_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> SecurityGroupRepository:
    return SecurityGroupRepository(session=session)


def get_read_membership_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> MembershipRepository:
    return MembershipRepository(session=session)


def get_read_record_access_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> RecordAccessRepository:
    return RecordAccessRepository(session=session)


def get_audit_trail(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> AuditTrail:
    """Get an AuditTrail sharing the write session of the mutating service."""
    return AuditTrail(
        audit_repository=AuditLogRepository(session=session),
        scope_to_tenant=actor.tenant_id,
        probe=DefaultAuditTrailProbe().with_context(observation_context_for(actor)),
    )
