"""Protocol for record access ledger observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RecordAccessServiceProbe(Protocol):
    """Domain probe for grant and revoke operations."""

    def record_access_granted(
        self, group_id: str, record_key: str, access_level: str
    ) -> None:
        """Record that a grant was created or replaced."""
        ...

    def record_access_revoked(self, group_id: str, record_key: str) -> None:
        """Record that a grant was removed."""
        ...

    def with_context(self, context: ObservationContext) -> RecordAccessServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRecordAccessServiceProbe:
    """Default implementation of RecordAccessServiceProbe using structlog."""

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
    ) -> DefaultRecordAccessServiceProbe:
        return DefaultRecordAccessServiceProbe(logger=self._logger, context=context)

    def record_access_granted(
        self, group_id: str, record_key: str, access_level: str
    ) -> None:
        self._logger.info(
            "record_access_granted",
            group_id=group_id,
            record=record_key,
            access_level=access_level,
            **self._get_context_kwargs(),
        )

    def record_access_revoked(self, group_id: str, record_key: str) -> None:
        self._logger.info(
            "record_access_revoked",
            group_id=group_id,
            record=record_key,
            **self._get_context_kwargs(),
        )
