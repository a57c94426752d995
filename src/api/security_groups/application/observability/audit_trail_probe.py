"""Protocol for audit trail observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuditTrailProbe(Protocol):
    """Domain probe for audit writes."""

    def audit_logged(self, entry_id: str, action: str, target_id: str | None) -> None:
        """Record that an audit entry was staged."""
        ...

    def audit_write_failed(self, action: str, target_id: str | None, error: str) -> None:
        """Record that an audit entry could not be written."""
        ...

    def with_context(self, context: ObservationContext) -> AuditTrailProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuditTrailProbe:
    """Default implementation of AuditTrailProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuditTrailProbe:
        return DefaultAuditTrailProbe(logger=self._logger, context=context)

    def audit_logged(self, entry_id: str, action: str, target_id: str | None) -> None:
        self._logger.debug(
            "audit_logged",
            entry_id=entry_id,
            action=action,
            target_id=target_id,
            **self._get_context_kwargs(),
        )

    def audit_write_failed(self, action: str, target_id: str | None, error: str) -> None:
        self._logger.error(
            "audit_write_failed",
            action=action,
            target_id=target_id,
            error=error,
            **self._get_context_kwargs(),
        )
