"""Protocol for permission cache observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PermissionCacheProbe(Protocol):
    """Domain probe for cache reads, writes and invalidations."""

    def cache_unavailable(self, operation: str, key: str, error: str) -> None:
        """Record that the cache backend could not be reached."""
        ...

    def cache_invalidated(self, scopes: list[str], keys_removed: int) -> None:
        """Record that cached entries were dropped after a mutation."""
        ...

    def with_context(self, context: ObservationContext) -> PermissionCacheProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPermissionCacheProbe:
    """Default implementation of PermissionCacheProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultPermissionCacheProbe:
        return DefaultPermissionCacheProbe(logger=self._logger, context=context)

    def cache_unavailable(self, operation: str, key: str, error: str) -> None:
        self._logger.warning(
            "cache_unavailable",
            operation=operation,
            key=key,
            error=error,
            **self._get_context_kwargs(),
        )

    def cache_invalidated(self, scopes: list[str], keys_removed: int) -> None:
        self._logger.debug(
            "cache_invalidated",
            scopes=scopes,
            keys_removed=keys_removed,
            **self._get_context_kwargs(),
        )
