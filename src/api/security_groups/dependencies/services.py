"""Application service dependency wiring for Security Groups routes.

Every service is scoped to the caller's tenant and gets probes bound to
the caller's observation context.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_write_session
from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import (
    DefaultConfigurationServiceProbe,
    DefaultHierarchyServiceProbe,
    DefaultMassAssignmentServiceProbe,
    DefaultMembershipServiceProbe,
    DefaultPermissionResolverProbe,
    DefaultRecordAccessServiceProbe,
)
from security_groups.application.services import (
    ConfigurationService,
    GroupHierarchyService,
    MassAssignmentService,
    MembershipService,
    PermissionResolver,
    RecordAccessService,
)
from security_groups.application.value_objects import CurrentActor
from security_groups.dependencies.actor import (
    get_current_actor,
    observation_context_for,
)
from security_groups.dependencies.cache import get_cache_coordinator
from security_groups.dependencies.repositories import (
    get_audit_trail,
    get_group_repository,
    get_membership_repository,
    get_read_group_repository,
    get_read_membership_repository,
    get_read_record_access_repository,
    get_record_access_repository,
)
from security_groups.infrastructure.group_repository import SecurityGroupRepository
from security_groups.infrastructure.membership_repository import MembershipRepository
from security_groups.infrastructure.record_access_repository import (
    RecordAccessRepository,
)


def get_group_hierarchy_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[SecurityGroupRepository, Depends(get_group_repository)],
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> GroupHierarchyService:
    """Get GroupHierarchyService instance.

    Args:
        session: Database session for transaction management
        group_repo: Group repository (shares session via FastAPI dependency caching)
        audit_trail: Audit trail on the same session
        cache: Permission cache coordinator
        actor: The caller, whose tenant scopes the service
    """
    return GroupHierarchyService(
        session=session,
        group_repository=group_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultHierarchyServiceProbe().with_context(
            observation_context_for(actor)
        ),
    )


def get_membership_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[SecurityGroupRepository, Depends(get_group_repository)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_membership_repository)
    ],
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> MembershipService:
    return MembershipService(
        session=session,
        group_repository=group_repo,
        membership_repository=membership_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultMembershipServiceProbe().with_context(
            observation_context_for(actor)
        ),
    )


def get_record_access_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[SecurityGroupRepository, Depends(get_group_repository)],
    record_repo: Annotated[
        RecordAccessRepository, Depends(get_record_access_repository)
    ],
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> RecordAccessService:
    return RecordAccessService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultRecordAccessServiceProbe().with_context(
            observation_context_for(actor)
        ),
    )


def get_mass_assignment_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[SecurityGroupRepository, Depends(get_group_repository)],
    record_repo: Annotated[
        RecordAccessRepository, Depends(get_record_access_repository)
    ],
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> MassAssignmentService:
    return MassAssignmentService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultMassAssignmentServiceProbe().with_context(
            observation_context_for(actor)
        ),
    )


def get_configuration_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repo: Annotated[SecurityGroupRepository, Depends(get_group_repository)],
    record_repo: Annotated[
        RecordAccessRepository, Depends(get_record_access_repository)
    ],
    audit_trail: Annotated[AuditTrail, Depends(get_audit_trail)],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> ConfigurationService:
    return ConfigurationService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultConfigurationServiceProbe().with_context(
            observation_context_for(actor)
        ),
    )


def get_permission_resolver(
    group_repo: Annotated[SecurityGroupRepository, Depends(get_read_group_repository)],
    membership_repo: Annotated[
        MembershipRepository, Depends(get_read_membership_repository)
    ],
    record_repo: Annotated[
        RecordAccessRepository, Depends(get_read_record_access_repository)
    ],
    cache: Annotated[PermissionCacheCoordinator, Depends(get_cache_coordinator)],
    actor: Annotated[CurrentActor, Depends(get_current_actor)],
) -> PermissionResolver:
    """Get PermissionResolver instance on the read session."""
    return PermissionResolver(
        group_repository=group_repo,
        membership_repository=membership_repo,
        record_access_repository=record_repo,
        cache=cache,
        scope_to_tenant=actor.tenant_id,
        probe=DefaultPermissionResolverProbe().with_context(
            observation_context_for(actor)
        ),
    )
