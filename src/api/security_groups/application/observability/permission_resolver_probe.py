"""Protocol for permission resolver observability.

Captures access decisions and cache behaviour of the resolver so that
denials and cache hit rates can be followed in the logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class PermissionResolverProbe(Protocol):
    """Domain probe for permission resolution."""

    def access_check_cache_hit(
        self, user_id: str, record_key: str, action: str
    ) -> None:
        """Record that an access decision was served from the cache."""
        ...

    def access_checked(
        self,
        user_id: str,
        record_key: str,
        action: str,
        allowed: bool,
        groups_considered: int,
    ) -> None:
        """Record a freshly computed access decision."""
        ...

    def effective_groups_resolved(
        self, user_id: str, group_count: int, cached: bool
    ) -> None:
        """Record that a user's effective groups were resolved."""
        ...

    def effective_permissions_resolved(
        self, user_id: str, key_count: int, cached: bool
    ) -> None:
        """Record that a user's effective permission map was resolved."""
        ...

    def with_context(self, context: ObservationContext) -> PermissionResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultPermissionResolverProbe:
    """Default implementation of PermissionResolverProbe using structlog."""

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
    ) -> DefaultPermissionResolverProbe:
        return DefaultPermissionResolverProbe(logger=self._logger, context=context)

    def access_check_cache_hit(
        self, user_id: str, record_key: str, action: str
    ) -> None:
        self._logger.debug(
            "access_check_cache_hit",
            subject_id=user_id,
            record=record_key,
            action=action,
            **self._get_context_kwargs(),
        )

    def access_checked(
        self,
        user_id: str,
        record_key: str,
        action: str,
        allowed: bool,
        groups_considered: int,
    ) -> None:
        self._logger.info(
            "access_checked",
            subject_id=user_id,
            record=record_key,
            action=action,
            allowed=allowed,
            groups_considered=groups_considered,
            **self._get_context_kwargs(),
        )

    def effective_groups_resolved(
        self, user_id: str, group_count: int, cached: bool
    ) -> None:
        self._logger.debug(
            "effective_groups_resolved",
            subject_id=user_id,
            group_count=group_count,
            cached=cached,
            **self._get_context_kwargs(),
        )

    def effective_permissions_resolved(
        self, user_id: str, key_count: int, cached: bool
    ) -> None:
        self._logger.debug(
            "effective_permissions_resolved",
            subject_id=user_id,
            key_count=key_count,
            cached=cached,
            **self._get_context_kwargs(),
        )
