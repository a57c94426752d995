"""Protocol for group hierarchy service observability.

Defines the interface for domain probes that capture application-level
domain events for hierarchy store operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HierarchyServiceProbe(Protocol):
    """Domain probe for hierarchy store operations."""

    def group_created(
        self, group_id: str, name: str, tenant_id: str, parent_id: str | None
    ) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, name: str, tenant_id: str, error: str) -> None:
        """Record that group creation failed."""
        ...

    def group_updated(
        self, group_id: str, tenant_id: str, changed_fields: list[str]
    ) -> None:
        """Record that a group was updated."""
        ...

    def group_update_failed(self, group_id: str, tenant_id: str, error: str) -> None:
        """Record that a group update failed."""
        ...

    def group_reparent_rejected(
        self, group_id: str, candidate_parent_id: str, reason: str
    ) -> None:
        """Record that a reparent was rejected before any write."""
        ...

    def group_deleted(
        self, group_id: str, tenant_id: str, reparented_children: int
    ) -> None:
        """Record that a group was deleted and its children re-parented."""
        ...

    def group_deletion_failed(self, group_id: str, tenant_id: str, error: str) -> None:
        """Record that a group deletion failed."""
        ...

    def with_context(self, context: ObservationContext) -> HierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHierarchyServiceProbe:
    """Default implementation of HierarchyServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultHierarchyServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultHierarchyServiceProbe(logger=self._logger, context=context)

    def group_created(
        self, group_id: str, name: str, tenant_id: str, parent_id: str | None
    ) -> None:
        self._logger.info(
            "security_group_created",
            group_id=group_id,
            name=name,
            tenant_id=tenant_id,
            parent_id=parent_id,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, name: str, tenant_id: str, error: str) -> None:
        self._logger.error(
            "security_group_creation_failed",
            name=name,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_updated(
        self, group_id: str, tenant_id: str, changed_fields: list[str]
    ) -> None:
        self._logger.info(
            "security_group_updated",
            group_id=group_id,
            tenant_id=tenant_id,
            changed_fields=changed_fields,
            **self._get_context_kwargs(),
        )

    def group_reparent_rejected(
        self, group_id: str, candidate_parent_id: str, reason: str
    ) -> None:
        self._logger.warning(
            "security_group_reparent_rejected",
            group_id=group_id,
            candidate_parent_id=candidate_parent_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def group_deleted(
        self, group_id: str, tenant_id: str, reparented_children: int
    ) -> None:
        self._logger.info(
            "security_group_deleted",
            group_id=group_id,
            tenant_id=tenant_id,
            reparented_children=reparented_children,
            **self._get_context_kwargs(),
        )

    def group_update_failed(self, group_id: str, tenant_id: str, error: str) -> None:
        self._logger.error(
            "security_group_update_failed",
            group_id=group_id,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_deletion_failed(self, group_id: str, tenant_id: str, error: str) -> None:
        self._logger.error(
            "security_group_deletion_failed",
            group_id=group_id,
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )
