"""Fixtures for Security Groups route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from security_groups.application.audit_trail import AuditTrail
from security_groups.application.services import (
    ConfigurationService,
    GroupHierarchyService,
    MassAssignmentService,
    MembershipService,
    PermissionResolver,
    RecordAccessService,
)
from security_groups.application.value_objects import CurrentActor
from security_groups.domain.value_objects import TenantId, UserId


@pytest.fixture
def mock_current_actor() -> CurrentActor:
    return CurrentActor(
        user_id=UserId(value="admin-1"),
        tenant_id=TenantId(value="tenant-acme"),
    )


@pytest.fixture
def mock_hierarchy_service() -> AsyncMock:
    return AsyncMock(spec=GroupHierarchyService)


@pytest.fixture
def mock_membership_service() -> AsyncMock:
    return AsyncMock(spec=MembershipService)


@pytest.fixture
def mock_record_service() -> AsyncMock:
    return AsyncMock(spec=RecordAccessService)


@pytest.fixture
def mock_mass_assignment_service() -> AsyncMock:
    return AsyncMock(spec=MassAssignmentService)


@pytest.fixture
def mock_configuration_service() -> AsyncMock:
    return AsyncMock(spec=ConfigurationService)


@pytest.fixture
def mock_resolver() -> AsyncMock:
    return AsyncMock(spec=PermissionResolver)


@pytest.fixture
def mock_audit_trail() -> AsyncMock:
    return AsyncMock(spec=AuditTrail)


@pytest.fixture
def app(
    mock_current_actor,
    mock_hierarchy_service,
    mock_membership_service,
    mock_record_service,
    mock_mass_assignment_service,
    mock_configuration_service,
    mock_resolver,
    mock_audit_trail,
) -> FastAPI:
    """Create an app with every Security Groups dependency mocked."""
    from security_groups.dependencies.actor import get_current_actor
    from security_groups.dependencies.repositories import get_audit_trail
    from security_groups.dependencies.services import (
        get_configuration_service,
        get_group_hierarchy_service,
        get_mass_assignment_service,
        get_membership_service,
        get_permission_resolver,
        get_record_access_service,
    )
    from security_groups.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_current_actor] = lambda: mock_current_actor
    app.dependency_overrides[get_group_hierarchy_service] = (
        lambda: mock_hierarchy_service
    )
    app.dependency_overrides[get_membership_service] = lambda: mock_membership_service
    app.dependency_overrides[get_record_access_service] = lambda: mock_record_service
    app.dependency_overrides[get_mass_assignment_service] = (
        lambda: mock_mass_assignment_service
    )
    app.dependency_overrides[get_configuration_service] = (
        lambda: mock_configuration_service
    )
    app.dependency_overrides[get_permission_resolver] = lambda: mock_resolver
    app.dependency_overrides[get_audit_trail] = lambda: mock_audit_trail
    app.include_router(router)
    return app


@pytest.fixture
def test_client(app: FastAPI) -> TestClient:
    return TestClient(app)
