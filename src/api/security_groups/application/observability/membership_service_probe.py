"""Protocol for membership registry observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MembershipServiceProbe(Protocol):
    """Domain probe for membership registry operations."""

    def member_added(self, group_id: str, user_id: str, was_member: bool) -> None:
        """Record that a membership was created or refreshed."""
        ...

    def member_removed(self, group_id: str, user_id: str) -> None:
        """Record that a membership was removed."""
        ...

    def member_updated(
        self, group_id: str, user_id: str, changed_attributes: list[str]
    ) -> None:
        """Record that membership attributes changed."""
        ...

    def with_context(self, context: ObservationContext) -> MembershipServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMembershipServiceProbe:
    """Default implementation of MembershipServiceProbe using structlog."""

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
    ) -> DefaultMembershipServiceProbe:
        return DefaultMembershipServiceProbe(logger=self._logger, context=context)

    def member_added(self, group_id: str, user_id: str, was_member: bool) -> None:
        self._logger.info(
            "security_group_member_added",
            group_id=group_id,
            member_id=user_id,
            was_member=was_member,
            **self._get_context_kwargs(),
        )

    def member_removed(self, group_id: str, user_id: str) -> None:
        self._logger.info(
            "security_group_member_removed",
            group_id=group_id,
            member_id=user_id,
            **self._get_context_kwargs(),
        )

    def member_updated(
        self, group_id: str, user_id: str, changed_attributes: list[str]
    ) -> None:
        self._logger.info(
            "security_group_member_updated",
            group_id=group_id,
            member_id=user_id,
            changed_attributes=changed_attributes,
            **self._get_context_kwargs(),
        )
