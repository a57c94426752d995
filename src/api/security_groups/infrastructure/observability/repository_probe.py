"""Domain probes for Security Groups repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events related to group, membership and grant
persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SecurityGroupRepositoryProbe(Protocol):
    """Domain probe for group repository operations."""

    def group_saved(self, group_id: str, tenant_id: str) -> None:
        """Record that a group was successfully saved."""
        ...

    def group_not_found(self, group_id: str) -> None:
        """Record that a group was not found."""
        ...

    def group_deleted(
        self, group_id: str, grants_removed: int, memberships_removed: int
    ) -> None:
        """Record that a group and its dependent rows were deleted."""
        ...

    def with_context(self, context: ObservationContext) -> SecurityGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class AccessRepositoryProbe(Protocol):
    """Domain probe for membership and grant repository operations."""

    def membership_saved(self, group_id: str, user_id: str) -> None:
        """Record that a membership was upserted."""
        ...

    def membership_deleted(self, group_id: str, user_id: str) -> None:
        """Record that a membership row was deleted."""
        ...

    def grant_saved(self, group_id: str, record_key: str) -> None:
        """Record that a grant was upserted."""
        ...

    def grant_deleted(self, group_id: str, record_key: str) -> None:
        """Record that a grant row was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> AccessRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSecurityGroupRepositoryProbe:
    """Default implementation of SecurityGroupRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultSecurityGroupRepositoryProbe:
        return DefaultSecurityGroupRepositoryProbe(logger=self._logger, context=context)

    def group_saved(self, group_id: str, tenant_id: str) -> None:
        self._logger.debug(
            "security_group_saved",
            group_id=group_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: str) -> None:
        self._logger.debug(
            "security_group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def group_deleted(
        self, group_id: str, grants_removed: int, memberships_removed: int
    ) -> None:
        self._logger.info(
            "security_group_row_deleted",
            group_id=group_id,
            grants_removed=grants_removed,
            memberships_removed=memberships_removed,
            **self._get_context_kwargs(),
        )


class DefaultAccessRepositoryProbe:
    """Default implementation of AccessRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAccessRepositoryProbe:
        return DefaultAccessRepositoryProbe(logger=self._logger, context=context)

    def membership_saved(self, group_id: str, user_id: str) -> None:
        self._logger.debug(
            "membership_saved",
            group_id=group_id,
            member_id=user_id,
            **self._get_context_kwargs(),
        )

    def membership_deleted(self, group_id: str, user_id: str) -> None:
        self._logger.debug(
            "membership_deleted",
            group_id=group_id,
            member_id=user_id,
            **self._get_context_kwargs(),
        )

    def grant_saved(self, group_id: str, record_key: str) -> None:
        self._logger.debug(
            "record_grant_saved",
            group_id=group_id,
            record=record_key,
            **self._get_context_kwargs(),
        )

    def grant_deleted(self, group_id: str, record_key: str) -> None:
        self._logger.debug(
            "record_grant_deleted",
            group_id=group_id,
            record=record_key,
            **self._get_context_kwargs(),
        )
