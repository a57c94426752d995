"""Unit tests for membership and record grant HTTP routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

from fastapi import status
from fastapi.testclient import TestClient

from security_groups.domain.aggregates import GroupMembership, RecordAccessGrant
from security_groups.domain.value_objects import (
    AccessLevel,
    FieldPermissions,
    GroupId,
    MembershipAttributes,
    RecordRef,
    UserId,
)
from security_groups.ports.exceptions import (
    MembershipNotFoundError,
    SecurityGroupNotFoundError,
)


class TestMemberRoutes:
    def test_add_member_passes_attributes(
        self,
        test_client: TestClient,
        mock_membership_service: AsyncMock,
        mock_current_actor,
    ) -> None:
        group_id = GroupId.generate()
        mock_membership_service.add_member.return_value = GroupMembership(
            group_id=group_id,
            user_id=UserId(value="alice"),
            attributes=MembershipAttributes.from_mapping({"is_admin": True}),
            added_by=mock_current_actor.user_id,
        )

        response = test_client.put(
            f"/security-groups/{group_id.value}/members/alice",
            json={"attributes": {"is_admin": True}},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["user_id"] == "alice"
        assert body["attributes"]["is_admin"] is True
        assert body["added_by"] == "admin-1"
        mock_membership_service.add_member.assert_called_once_with(
            group_id,
            UserId(value="alice"),
            mock_current_actor.user_id,
            attributes={"is_admin": True},
        )

    def test_add_member_to_unknown_group_returns_404(
        self, test_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.add_member.side_effect = SecurityGroupNotFoundError(
            "Security group not found"
        )

        response = test_client.put(
            f"/security-groups/{GroupId.generate().value}/members/alice", json={}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_malformed_attributes_return_400(
        self, test_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.add_member.side_effect = ValueError(
            "is_admin must be a boolean"
        )

        response = test_client.put(
            f"/security-groups/{GroupId.generate().value}/members/alice",
            json={"attributes": {"is_admin": "yes"}},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "is_admin must be a boolean"

    def test_update_attributes_of_non_member_returns_404(
        self, test_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.update_member_attributes.side_effect = (
            MembershipNotFoundError("alice is not a member")
        )

        response = test_client.patch(
            f"/security-groups/{GroupId.generate().value}/members/alice",
            json={"attributes": {"notes": "x"}},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remove_member_returns_204(
        self, test_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.remove_member.return_value = True

        response = test_client.delete(
            f"/security-groups/{GroupId.generate().value}/members/alice"
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_remove_non_member_returns_404(
        self, test_client: TestClient, mock_membership_service: AsyncMock
    ) -> None:
        mock_membership_service.remove_member.return_value = False

        response = test_client.delete(
            f"/security-groups/{GroupId.generate().value}/members/alice"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestRecordRoutes:
    def test_grant_returns_grant(
        self,
        test_client: TestClient,
        mock_record_service: AsyncMock,
        mock_current_actor,
    ) -> None:
        group_id = GroupId.generate()
        record = RecordRef(record_type="account", record_id="42")
        mock_record_service.grant_record_access.return_value = RecordAccessGrant(
            group_id=group_id,
            record=record,
            access_level=AccessLevel.FULL,
            field_permissions=FieldPermissions.from_mapping({"amount": ["read"]}),
            assigned_by=mock_current_actor.user_id,
        )

        response = test_client.put(
            f"/security-groups/{group_id.value}/records/account/42",
            json={"access_level": "owner", "field_permissions": {"amount": ["read"]}},
        )

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["access_level"] == "full"
        assert body["field_permissions"] == {"amount": ["read"]}
        mock_record_service.grant_record_access.assert_called_once_with(
            group_id,
            record,
            mock_current_actor.user_id,
            access_level="owner",
            field_permissions={"amount": ["read"]},
        )

    def test_invalid_access_level_returns_400(
        self, test_client: TestClient, mock_record_service: AsyncMock
    ) -> None:
        mock_record_service.grant_record_access.side_effect = ValueError(
            "Invalid access level: 'superuser'"
        )

        response = test_client.put(
            f"/security-groups/{GroupId.generate().value}/records/account/42",
            json={"access_level": "superuser"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_revoke_missing_grant_returns_404(
        self, test_client: TestClient, mock_record_service: AsyncMock
    ) -> None:
        mock_record_service.revoke_record_access.return_value = False

        response = test_client.delete(
            f"/security-groups/{GroupId.generate().value}/records/account/42"
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_grants(
        self, test_client: TestClient, mock_record_service: AsyncMock
    ) -> None:
        group_id = GroupId.generate()
        mock_record_service.list_grants_for_group.return_value = [
            RecordAccessGrant(
                group_id=group_id,
                record=RecordRef(record_type="account", record_id="42"),
            )
        ]

        response = test_client.get(f"/security-groups/{group_id.value}/records")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["access_level"] == "read"
