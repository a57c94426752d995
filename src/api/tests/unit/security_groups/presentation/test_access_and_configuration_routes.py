"""Unit tests for access check and configuration HTTP routes."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock

from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from security_groups.application.value_objects import TenantConfiguration
from security_groups.domain.aggregates import SecurityGroup
from security_groups.domain.value_objects import (
    RecordAction,
    RecordRef,
    TenantId,
    UserId,
)
from security_groups.ports.exceptions import (
    HierarchyCycleError,
    InvalidConfigurationError,
)


class TestAccessChecks:
    def test_returns_decision(
        self, test_client: TestClient, mock_resolver: AsyncMock
    ) -> None:
        mock_resolver.user_has_record_access.return_value = True

        response = test_client.get(
            "/security-groups/access-checks",
            params={
                "user_id": "alice",
                "record_type": "account",
                "record_id": "42",
                "action": "update",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["allowed"] is True
        assert body["action"] == "write"
        mock_resolver.user_has_record_access.assert_called_once_with(
            UserId(value="alice"),
            RecordRef(record_type="account", record_id="42"),
            RecordAction.WRITE,
            None,
        )

    def test_denied_is_a_normal_response(
        self, test_client: TestClient, mock_resolver: AsyncMock
    ) -> None:
        mock_resolver.user_has_record_access.return_value = False

        response = test_client.get(
            "/security-groups/access-checks",
            params={
                "user_id": "alice",
                "record_type": "account",
                "record_id": "42",
                "field": "amount",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["allowed"] is False
        assert response.json()["field"] == "amount"

    def test_unknown_action_returns_400(
        self, test_client: TestClient, mock_resolver: AsyncMock
    ) -> None:
        response = test_client.get(
            "/security-groups/access-checks",
            params={
                "user_id": "alice",
                "record_type": "account",
                "record_id": "42",
                "action": "launch",
            },
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_resolver.user_has_record_access.assert_not_called()

    def test_effective_groups(
        self, test_client: TestClient, mock_resolver: AsyncMock
    ) -> None:
        root = SecurityGroup.create(name="All Staff", tenant_id=TenantId(value="t"))
        mock_resolver.effective_groups_for.return_value = [root]

        response = test_client.get("/security-groups/users/alice/effective-groups")

        assert response.status_code == status.HTTP_200_OK
        assert [g["name"] for g in response.json()["groups"]] == ["All Staff"]

    def test_effective_permissions(
        self, test_client: TestClient, mock_resolver: AsyncMock
    ) -> None:
        mock_resolver.get_user_effective_permissions.return_value = {
            "reports": {"export": True}
        }

        response = test_client.get(
            "/security-groups/users/alice/effective-permissions"
        )

        assert response.json() == {
            "user_id": "alice",
            "permissions": {"reports": {"export": True}},
        }


class TestConfigurationRoutes:
    def test_export(
        self, test_client: TestClient, mock_configuration_service: AsyncMock
    ) -> None:
        mock_configuration_service.export_configuration.return_value = (
            TenantConfiguration(
                tenant_id="tenant-acme", exported_at=datetime.now(UTC), groups=[]
            )
        )

        response = test_client.get("/security-groups/configuration")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["format_version"] == 1

    def test_import_returns_201_with_id_map(
        self,
        test_client: TestClient,
        mock_configuration_service: AsyncMock,
        mock_current_actor,
    ) -> None:
        mock_configuration_service.import_configuration.return_value = {"a": "NEW"}
        document = {"tenant_id": "src", "exported_at": "2026-01-01T00:00:00Z"}

        response = test_client.post("/security-groups/configuration", json=document)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {"groups_imported": 1, "id_map": {"a": "NEW"}}
        mock_configuration_service.import_configuration.assert_called_once_with(
            document, mock_current_actor.user_id
        )

    def test_invalid_document_returns_400(
        self, test_client: TestClient, mock_configuration_service: AsyncMock
    ) -> None:
        mock_configuration_service.import_configuration.side_effect = (
            InvalidConfigurationError("Invalid configuration document")
        )

        response = test_client.post("/security-groups/configuration", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cyclic_document_returns_409(
        self, test_client: TestClient, mock_configuration_service: AsyncMock
    ) -> None:
        mock_configuration_service.import_configuration.side_effect = (
            HierarchyCycleError("a", "b")
        )

        response = test_client.post("/security-groups/configuration", json={})

        assert response.status_code == status.HTTP_409_CONFLICT


class TestIdentityHeaders:
    def test_missing_headers_return_401(
        self, app: FastAPI, mock_configuration_service: AsyncMock
    ) -> None:
        from security_groups.dependencies.actor import get_current_actor

        del app.dependency_overrides[get_current_actor]
        client = TestClient(app)

        response = client.post("/security-groups/configuration", json={})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        mock_configuration_service.import_configuration.assert_not_called()

    def test_headers_identify_actor(
        self, app: FastAPI, mock_configuration_service: AsyncMock
    ) -> None:
        from security_groups.dependencies.actor import get_current_actor

        del app.dependency_overrides[get_current_actor]
        mock_configuration_service.import_configuration.return_value = {}
        client = TestClient(app)

        response = client.post(
            "/security-groups/configuration",
            json={},
            headers={"X-User-Id": "bob", "X-Tenant-Id": "tenant-acme"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        args = mock_configuration_service.import_configuration.call_args[0]
        assert args[1] == UserId(value="bob")
