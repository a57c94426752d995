"""Unit tests for PermissionCacheCoordinator."""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest

from security_groups.application.caching import PermissionCacheCoordinator
from security_groups.application.observability import PermissionCacheProbe
from security_groups.domain.value_objects import RecordAction, RecordRef, TenantId, UserId
from security_groups.ports.exceptions import CacheUnavailableError

TENANT = TenantId(value="tenant-acme")
ALICE = UserId(value="alice")
ACCOUNT = RecordRef(record_type="account", record_id="42")


@pytest.fixture
def backend():
    backend = MagicMock()
    backend.get = AsyncMock(side_effect=CacheUnavailableError("down"))
    backend.set = AsyncMock(side_effect=CacheUnavailableError("down"))
    backend.invalidate = AsyncMock(side_effect=CacheUnavailableError("down"))
    return backend


@pytest.fixture
def probe():
    return create_autospec(PermissionCacheProbe, instance=True)


@pytest.fixture
def coordinator(backend, probe) -> PermissionCacheCoordinator:
    return PermissionCacheCoordinator(backend, key_prefix="sg", probe=probe)


class TestKeys:
    def test_keys_are_namespaced_by_prefix_and_tenant(self, coordinator):
        assert coordinator.hierarchy_key(TENANT) == "sg:tenant-acme:hierarchy"
        assert (
            coordinator.effective_groups_key(TENANT, ALICE)
            == "sg:tenant-acme:effective_groups:alice"
        )

    def test_access_key_includes_field_when_given(self, coordinator):
        plain = coordinator.access_key(TENANT, ALICE, ACCOUNT, RecordAction.READ)
        scoped = coordinator.access_key(
            TENANT, ALICE, ACCOUNT, RecordAction.READ, field="amount"
        )

        assert plain == "sg:tenant-acme:access:alice:account:42:read"
        assert scoped == f"{plain}:amount"

    def test_scopes(self):
        assert PermissionCacheCoordinator.tenant_scope(TENANT) == "tenant:tenant-acme"
        assert (
            PermissionCacheCoordinator.user_scope(TENANT, ALICE)
            == "user:tenant-acme:alice"
        )
        assert (
            PermissionCacheCoordinator.record_scope(TENANT, ACCOUNT)
            == "record:tenant-acme:account:42"
        )


class TestUnavailableBackend:
    @pytest.mark.asyncio
    async def test_get_is_a_miss(self, coordinator, probe):
        assert await coordinator.get("k") is None
        probe.cache_unavailable.assert_called_once_with(
            operation="get", key="k", error="down"
        )

    @pytest.mark.asyncio
    async def test_set_is_ignored(self, coordinator, probe):
        await coordinator.set("k", True, 60, ["tenant:tenant-acme"])
        probe.cache_unavailable.assert_called_once()

    @pytest.mark.asyncio
    async def test_invalidate_reports_nothing_removed(self, coordinator, probe):
        assert await coordinator.invalidate("tenant:tenant-acme") == 0
        probe.cache_invalidated.assert_not_called()


class TestInvalidate:
    @pytest.mark.asyncio
    async def test_without_scopes_skips_backend(self, coordinator, backend):
        assert await coordinator.invalidate() == 0
        backend.invalidate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reports_removed_keys(self, coordinator, backend, probe):
        backend.invalidate = AsyncMock(return_value=4)

        assert await coordinator.invalidate("tenant:tenant-acme") == 4
        probe.cache_invalidated.assert_called_once_with(
            scopes=["tenant:tenant-acme"], keys_removed=4
        )
