"""Protocol for mass-assignment observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MassAssignmentServiceProbe(Protocol):
    """Domain probe for mass-assignment runs."""

    def mass_assignment_applied(
        self, group_id: str, records_count: int, grants_applied: int
    ) -> None:
        """Record a completed mass-assignment run."""
        ...

    def mass_assignment_skipped(self, group_id: str, reason: str) -> None:
        """Record a run that did nothing because the group has no settings."""
        ...

    def with_context(self, context: ObservationContext) -> MassAssignmentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMassAssignmentServiceProbe:
    """Default implementation of MassAssignmentServiceProbe using structlog."""

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
    ) -> DefaultMassAssignmentServiceProbe:
        return DefaultMassAssignmentServiceProbe(logger=self._logger, context=context)

    def mass_assignment_applied(
        self, group_id: str, records_count: int, grants_applied: int
    ) -> None:
        self._logger.info(
            "mass_assignment_applied",
            group_id=group_id,
            records_count=records_count,
            grants_applied=grants_applied,
            **self._get_context_kwargs(),
        )

    def mass_assignment_skipped(self, group_id: str, reason: str) -> None:
        self._logger.info(
            "mass_assignment_skipped",
            group_id=group_id,
            reason=reason,
            **self._get_context_kwargs(),
        )
