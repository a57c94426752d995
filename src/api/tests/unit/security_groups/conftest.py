"""Fixtures wiring Security Groups services onto in-memory stores."""

from __future__ import annotations

import pytest

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.services import (
    ConfigurationService,
    GroupHierarchyService,
    MassAssignmentService,
    MembershipService,
    PermissionResolver,
    RecordAccessService,
)
from security_groups.domain.value_objects import TenantId, UserId
from security_groups.infrastructure.cache import InMemoryPermissionCache
from tests.unit.security_groups.fakes import (
    InMemoryAuditLogRepository,
    InMemoryGroupRepository,
    InMemoryMembershipRepository,
    InMemoryRecordAccessRepository,
    make_session,
)


@pytest.fixture
def tenant_id() -> TenantId:
    return TenantId(value="tenant-acme")


@pytest.fixture
def other_tenant_id() -> TenantId:
    return TenantId(value="tenant-globex")


@pytest.fixture
def admin_id() -> UserId:
    return UserId(value="admin-1")


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def group_repo() -> InMemoryGroupRepository:
    return InMemoryGroupRepository()


@pytest.fixture
def membership_repo(group_repo) -> InMemoryMembershipRepository:
    return InMemoryMembershipRepository(group_repo)


@pytest.fixture
def record_repo(group_repo) -> InMemoryRecordAccessRepository:
    return InMemoryRecordAccessRepository(group_repo)


@pytest.fixture
def audit_repo() -> InMemoryAuditLogRepository:
    return InMemoryAuditLogRepository()


@pytest.fixture
def cache_backend() -> InMemoryPermissionCache:
    return InMemoryPermissionCache()


@pytest.fixture
def cache(cache_backend) -> PermissionCacheCoordinator:
    return PermissionCacheCoordinator(cache_backend)


@pytest.fixture
def audit_trail(audit_repo, tenant_id) -> AuditTrail:
    return AuditTrail(audit_repository=audit_repo, scope_to_tenant=tenant_id)


@pytest.fixture
def hierarchy_service(
    session, group_repo, audit_trail, cache, tenant_id
) -> GroupHierarchyService:
    return GroupHierarchyService(
        session=session,
        group_repository=group_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=tenant_id,
    )


@pytest.fixture
def membership_service(
    session, group_repo, membership_repo, audit_trail, cache, tenant_id
) -> MembershipService:
    return MembershipService(
        session=session,
        group_repository=group_repo,
        membership_repository=membership_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=tenant_id,
    )


@pytest.fixture
def record_service(
    session, group_repo, record_repo, audit_trail, cache, tenant_id
) -> RecordAccessService:
    return RecordAccessService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=tenant_id,
    )


@pytest.fixture
def mass_assignment_service(
    session, group_repo, record_repo, audit_trail, cache, tenant_id
) -> MassAssignmentService:
    return MassAssignmentService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=tenant_id,
    )


@pytest.fixture
def configuration_service(
    session, group_repo, record_repo, audit_trail, cache, tenant_id
) -> ConfigurationService:
    return ConfigurationService(
        session=session,
        group_repository=group_repo,
        record_access_repository=record_repo,
        audit_trail=audit_trail,
        cache=cache,
        scope_to_tenant=tenant_id,
    )


@pytest.fixture
def resolver(
    group_repo, membership_repo, record_repo, cache, tenant_id
) -> PermissionResolver:
    return PermissionResolver(
        group_repository=group_repo,
        membership_repository=membership_repo,
        record_access_repository=record_repo,
        cache=cache,
        scope_to_tenant=tenant_id,
    )
