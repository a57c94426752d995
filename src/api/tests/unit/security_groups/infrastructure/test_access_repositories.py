"""Unit tests for MembershipRepository and RecordAccessRepository saves.

Saves must be a single upsert statement so two concurrent adds or grants
of the same pair never race between a read and an insert.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from security_groups.domain.aggregates import GroupMembership, RecordAccessGrant
from security_groups.domain.value_objects import (
    AccessLevel,
    GroupId,
    MembershipAttributes,
    RecordRef,
    UserId,
)
from security_groups.infrastructure.membership_repository import MembershipRepository
from security_groups.infrastructure.record_access_repository import (
    RecordAccessRepository,
)


@pytest.fixture
def mock_session():
    session = AsyncMock()
    session.add = MagicMock()
    return session


def _executed_sql(session) -> list[str]:
    return [
        str(call.args[0].compile(dialect=postgresql.dialect()))
        for call in session.execute.await_args_list
    ]


class TestMembershipSave:
    @pytest.mark.asyncio
    async def test_save_is_one_upsert_keyed_by_group_and_user(self, mock_session):
        repository = MembershipRepository(session=mock_session, probe=MagicMock())
        membership = GroupMembership(
            group_id=GroupId.generate(),
            user_id=UserId(value="alice"),
            attributes=MembershipAttributes.from_mapping({"is_admin": True}),
        )

        await repository.save(membership)

        (sql,) = _executed_sql(mock_session)
        assert sql.startswith("INSERT INTO security_group_memberships")
        assert "ON CONFLICT (group_id, user_id) DO UPDATE" in sql
        assert "attributes = excluded.attributes" in sql
        assert "joined_at = excluded" not in sql
        mock_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeated_saves_never_read_first(self, mock_session):
        repository = MembershipRepository(session=mock_session, probe=MagicMock())
        membership = GroupMembership(
            group_id=GroupId.generate(), user_id=UserId(value="alice")
        )

        await repository.save(membership)
        await repository.save(membership)

        sql = _executed_sql(mock_session)
        assert len(sql) == 2
        assert all(s.startswith("INSERT") for s in sql)

    @pytest.mark.asyncio
    async def test_save_reports_to_probe(self, mock_session):
        probe = MagicMock()
        repository = MembershipRepository(session=mock_session, probe=probe)
        group_id = GroupId.generate()

        await repository.save(
            GroupMembership(group_id=group_id, user_id=UserId(value="alice"))
        )

        probe.membership_saved.assert_called_once_with(group_id.value, "alice")


class TestRecordAccessSave:
    @pytest.mark.asyncio
    async def test_save_is_one_upsert_keyed_by_group_and_record(self, mock_session):
        repository = RecordAccessRepository(session=mock_session, probe=MagicMock())
        grant = RecordAccessGrant(
            group_id=GroupId.generate(),
            record=RecordRef(record_type="account", record_id="42"),
            access_level=AccessLevel.WRITE,
            assigned_by=UserId(value="admin-1"),
        )

        await repository.save(grant)

        (sql,) = _executed_sql(mock_session)
        assert sql.startswith("INSERT INTO security_group_record_access")
        assert "ON CONFLICT (group_id, record_type, record_id) DO UPDATE" in sql
        for column in (
            "access_level",
            "field_permissions",
            "assigned_by",
            "assigned_at",
        ):
            assert f"{column} = excluded.{column}" in sql
        mock_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_reports_to_probe(self, mock_session):
        probe = MagicMock()
        repository = RecordAccessRepository(session=mock_session, probe=probe)
        record = RecordRef(record_type="account", record_id="42")
        group_id = GroupId.generate()

        await repository.save(RecordAccessGrant(group_id=group_id, record=record))

        probe.grant_saved.assert_called_once_with(group_id.value, record.key)
