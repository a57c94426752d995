"""Unit tests for RecordAccessService."""

import pytest
import pytest_asyncio

from security_groups.domain.aggregates import AuditAction
from security_groups.domain.value_objects import AccessLevel, GroupId, RecordRef
from security_groups.ports.exceptions import SecurityGroupNotFoundError

ACCOUNT = RecordRef(record_type="account", record_id="42")


@pytest_asyncio.fixture
async def group(hierarchy_service, admin_id):
    return await hierarchy_service.create_group("Sales", admin_id)


class TestGrantRecordAccess:
    @pytest.mark.asyncio
    async def test_creates_grant(self, record_service, record_repo, group, admin_id):
        grant = await record_service.grant_record_access(
            group.id,
            ACCOUNT,
            admin_id,
            access_level="write",
            field_permissions={"amount": ["read"]},
        )

        assert grant.access_level is AccessLevel.WRITE
        assert grant.field_permissions.to_dict() == {"amount": ["read"]}
        assert len(record_repo.grants) == 1

    @pytest.mark.asyncio
    async def test_regrant_replaces_existing_grant(
        self, record_service, record_repo, audit_repo, group, admin_id
    ):
        await record_service.grant_record_access(group.id, ACCOUNT, admin_id)
        await record_service.grant_record_access(
            group.id, ACCOUNT, admin_id, access_level="full"
        )

        grants = await record_service.list_grants_for_group(group.id)
        assert len(grants) == 1
        assert grants[0].access_level is AccessLevel.FULL
        entry = audit_repo.entries[-1]
        assert entry.action == AuditAction.RECORD_ACCESS_GRANTED
        assert entry.before["access_level"] == "read"
        assert entry.after["access_level"] == "full"

    @pytest.mark.asyncio
    async def test_owner_is_alias_of_full(self, record_service, group, admin_id):
        grant = await record_service.grant_record_access(
            group.id, ACCOUNT, admin_id, access_level="owner"
        )
        assert grant.access_level is AccessLevel.FULL

    @pytest.mark.asyncio
    async def test_invalid_level_writes_nothing(
        self, record_service, record_repo, audit_repo, group, admin_id
    ):
        audits_before = len(audit_repo.entries)
        with pytest.raises(ValueError):
            await record_service.grant_record_access(
                group.id, ACCOUNT, admin_id, access_level="superuser"
            )
        assert record_repo.grants == {}
        assert len(audit_repo.entries) == audits_before

    @pytest.mark.asyncio
    async def test_unknown_group_raises(self, record_service, admin_id):
        with pytest.raises(SecurityGroupNotFoundError):
            await record_service.grant_record_access(
                GroupId.generate(), ACCOUNT, admin_id
            )


class TestRevokeRecordAccess:
    @pytest.mark.asyncio
    async def test_revokes_grant(self, record_service, record_repo, audit_repo, group, admin_id):
        await record_service.grant_record_access(group.id, ACCOUNT, admin_id)

        assert await record_service.revoke_record_access(group.id, ACCOUNT, admin_id) is True

        assert record_repo.grants == {}
        assert audit_repo.entries[-1].action == AuditAction.RECORD_ACCESS_REVOKED

    @pytest.mark.asyncio
    async def test_revoking_missing_grant_is_not_audited(
        self, record_service, audit_repo, group, admin_id
    ):
        audits_before = len(audit_repo.entries)

        assert await record_service.revoke_record_access(group.id, ACCOUNT, admin_id) is False

        assert len(audit_repo.entries) == audits_before


class TestListGrantsForRecord:
    @pytest.mark.asyncio
    async def test_lists_grants_of_every_tenant_group(
        self, hierarchy_service, record_service, group, admin_id
    ):
        support = await hierarchy_service.create_group("Support", admin_id)
        await record_service.grant_record_access(group.id, ACCOUNT, admin_id)
        await record_service.grant_record_access(support.id, ACCOUNT, admin_id)

        grants = await record_service.list_grants_for_record(ACCOUNT)

        assert {g.group_id for g in grants} == {group.id, support.id}
