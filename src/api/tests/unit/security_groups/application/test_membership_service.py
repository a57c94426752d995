"""Unit tests for MembershipService."""

import pytest
import pytest_asyncio

from security_groups.domain.aggregates import AuditAction, SecurityGroup
from security_groups.domain.value_objects import GroupId, UserId
from security_groups.ports.exceptions import (
    MembershipNotFoundError,
    SecurityGroupNotFoundError,
)

ALICE = UserId(value="alice")


@pytest_asyncio.fixture
async def group(hierarchy_service, admin_id):
    return await hierarchy_service.create_group("Sales", admin_id)


class TestAddMember:
    @pytest.mark.asyncio
    async def test_adds_membership(self, membership_service, membership_repo, group, admin_id):
        membership = await membership_service.add_member(
            group.id, ALICE, admin_id, attributes={"is_admin": True}
        )

        assert membership.attributes.is_admin is True
        assert membership.added_by == admin_id
        assert (group.id.value, "alice") in membership_repo.memberships

    @pytest.mark.asyncio
    async def test_adding_twice_keeps_one_membership_with_latest_attributes(
        self, membership_service, membership_repo, audit_repo, group, admin_id
    ):
        await membership_service.add_member(
            group.id, ALICE, admin_id, attributes={"is_admin": True}
        )
        await membership_service.add_member(
            group.id, ALICE, admin_id, attributes={"is_owner": True}
        )

        members = await membership_service.list_members(group.id)
        assert len(members) == 1
        assert members[0].attributes.is_owner is True
        assert members[0].attributes.is_admin is False

        added = [e for e in audit_repo.entries if e.action == AuditAction.MEMBER_ADDED]
        assert len(added) == 2
        assert added[1].before["is_admin"] is True

    @pytest.mark.asyncio
    async def test_unknown_group_raises(self, membership_service, admin_id):
        with pytest.raises(SecurityGroupNotFoundError):
            await membership_service.add_member(GroupId.generate(), ALICE, admin_id)

    @pytest.mark.asyncio
    async def test_group_of_other_tenant_is_not_found(
        self, membership_service, group_repo, other_tenant_id, admin_id
    ):
        foreign = SecurityGroup.create(name="Foreign", tenant_id=other_tenant_id)
        await group_repo.save(foreign)

        with pytest.raises(SecurityGroupNotFoundError):
            await membership_service.add_member(foreign.id, ALICE, admin_id)

    @pytest.mark.asyncio
    async def test_malformed_attributes_raise_value_error(
        self, membership_service, membership_repo, group, admin_id
    ):
        with pytest.raises(ValueError):
            await membership_service.add_member(
                group.id, ALICE, admin_id, attributes={"is_owner": "yes"}
            )
        assert membership_repo.memberships == {}


class TestRemoveMember:
    @pytest.mark.asyncio
    async def test_removes_membership(
        self, membership_service, membership_repo, audit_repo, group, admin_id
    ):
        await membership_service.add_member(group.id, ALICE, admin_id)

        assert await membership_service.remove_member(group.id, ALICE, admin_id) is True

        assert membership_repo.memberships == {}
        assert audit_repo.entries[-1].action == AuditAction.MEMBER_REMOVED

    @pytest.mark.asyncio
    async def test_removing_non_member_is_not_audited(
        self, membership_service, audit_repo, group, admin_id
    ):
        audits_before = len(audit_repo.entries)

        assert await membership_service.remove_member(group.id, ALICE, admin_id) is False

        assert len(audit_repo.entries) == audits_before


class TestUpdateMemberAttributes:
    @pytest.mark.asyncio
    async def test_merges_attributes_and_audits_changes(
        self, membership_service, audit_repo, group, admin_id
    ):
        await membership_service.add_member(
            group.id, ALICE, admin_id, attributes={"is_admin": True, "region": "emea"}
        )

        membership = await membership_service.update_member_attributes(
            group.id, ALICE, {"can_assign_records": True}, admin_id
        )

        assert membership.attributes.is_admin is True
        assert membership.attributes.can_assign_records is True
        assert membership.attributes.extra == {"region": "emea"}
        entry = audit_repo.entries[-1]
        assert entry.action == AuditAction.MEMBER_UPDATED
        assert entry.before == {"can_assign_records": False}
        assert entry.after == {"can_assign_records": True}

    @pytest.mark.asyncio
    async def test_unchanged_attributes_are_not_audited(
        self, membership_service, audit_repo, group, admin_id
    ):
        await membership_service.add_member(
            group.id, ALICE, admin_id, attributes={"is_admin": True}
        )
        audits_before = len(audit_repo.entries)

        await membership_service.update_member_attributes(
            group.id, ALICE, {"is_admin": True}, admin_id
        )

        assert len(audit_repo.entries) == audits_before

    @pytest.mark.asyncio
    async def test_non_member_raises(self, membership_service, group, admin_id):
        with pytest.raises(MembershipNotFoundError):
            await membership_service.update_member_attributes(
                group.id, ALICE, {"is_admin": True}, admin_id
            )
