"""Unit tests for Security Groups repository probes."""

from unittest.mock import Mock

from security_groups.infrastructure.observability import (
    DefaultAccessRepositoryProbe,
    DefaultSecurityGroupRepositoryProbe,
)
from shared_kernel.observability_context import ObservationContext


class TestDefaultSecurityGroupRepositoryProbe:
    def test_creates_with_default_logger(self):
        probe = DefaultSecurityGroupRepositoryProbe()
        assert probe._logger is not None

    def test_logs_group_deleted(self):
        mock_logger = Mock()
        probe = DefaultSecurityGroupRepositoryProbe(logger=mock_logger)

        probe.group_deleted("01ABC", grants_removed=2, memberships_removed=1)

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "security_group_row_deleted"
        assert call_args[1]["grants_removed"] == 2
        assert call_args[1]["memberships_removed"] == 1

    def test_with_context_adds_context_fields(self):
        mock_logger = Mock()
        probe = DefaultSecurityGroupRepositoryProbe(logger=mock_logger).with_context(
            ObservationContext(user_id="admin-1", tenant_id="tenant-acme")
        )

        probe.group_saved("01ABC", "tenant-acme")

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "security_group_saved"
        assert call_args[1]["user_id"] == "admin-1"


class TestDefaultAccessRepositoryProbe:
    def test_logs_grant_saved(self):
        mock_logger = Mock()
        probe = DefaultAccessRepositoryProbe(logger=mock_logger)

        probe.grant_saved("01ABC", "account:42")

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "record_grant_saved"
        assert call_args[1]["record"] == "account:42"

    def test_logs_membership_deleted(self):
        mock_logger = Mock()
        probe = DefaultAccessRepositoryProbe(logger=mock_logger)

        probe.membership_deleted("01ABC", "alice")

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "membership_deleted"
        assert call_args[1]["member_id"] == "alice"
