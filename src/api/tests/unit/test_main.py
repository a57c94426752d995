"""Unit tests for the main FastAPI application."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_read_session


@pytest.fixture
def app():
    from main import app

    yield app
    app.dependency_overrides.clear()


class TestHealthEndpoints:
    def test_health(self, app) -> None:
        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_health_db_reports_connected(self, app) -> None:
        session = AsyncMock()
        app.dependency_overrides[get_read_session] = lambda: session

        response = TestClient(app).get("/health/db")

        assert response.json() == {"status": "ok", "connected": True}
        session.execute.assert_awaited_once()

    def test_health_db_reports_failure(self, app) -> None:
        session = AsyncMock()
        session.execute.side_effect = ConnectionRefusedError("connection refused")
        app.dependency_overrides[get_read_session] = lambda: session

        response = TestClient(app).get("/health/db")

        assert response.json() == {
            "status": "error",
            "connected": False,
            "error": "connection refused",
        }


class TestRoutes:
    def test_security_group_routes_are_mounted(self, app) -> None:
        paths = {route.path for route in app.routes}

        assert "/security-groups" in paths
        assert "/security-groups/hierarchy" in paths
        assert "/security-groups/access-checks" in paths
        assert "/security-groups/configuration" in paths
        assert "/security-groups/{group_id}/members/{user_id}" in paths


class TestLifespan:
    def test_releases_resources_on_shutdown(self, app) -> None:
        probe = MagicMock()
        with (
            patch("main.DefaultStartupProbe", return_value=probe),
            patch("main.close_permission_cache", new_callable=AsyncMock) as close_cache,
            patch(
                "main.close_database_connections", new_callable=AsyncMock
            ) as close_db,
        ):
            with TestClient(app):
                probe.application_started.assert_called_once()
                close_cache.assert_not_awaited()

        close_cache.assert_awaited_once()
        close_db.assert_awaited_once()
        probe.application_stopped.assert_called_once()
