"""Protocol for configuration export/import observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConfigurationServiceProbe(Protocol):
    """Domain probe for configuration export and import."""

    def configuration_exported(
        self, tenant_id: str, group_count: int, grant_count: int
    ) -> None:
        """Record that a tenant configuration was exported."""
        ...

    def configuration_imported(
        self, tenant_id: str, group_count: int, grant_count: int
    ) -> None:
        """Record that a configuration document was imported."""
        ...

    def configuration_import_failed(self, tenant_id: str, error: str) -> None:
        """Record that an import was rejected or failed."""
        ...

    def with_context(self, context: ObservationContext) -> ConfigurationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConfigurationServiceProbe:
    """Default implementation of ConfigurationServiceProbe using structlog."""

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
    ) -> DefaultConfigurationServiceProbe:
        return DefaultConfigurationServiceProbe(logger=self._logger, context=context)

    def configuration_exported(
        self, tenant_id: str, group_count: int, grant_count: int
    ) -> None:
        self._logger.info(
            "configuration_exported",
            tenant_id=tenant_id,
            group_count=group_count,
            grant_count=grant_count,
            **self._get_context_kwargs(),
        )

    def configuration_imported(
        self, tenant_id: str, group_count: int, grant_count: int
    ) -> None:
        self._logger.info(
            "configuration_imported",
            tenant_id=tenant_id,
            group_count=group_count,
            grant_count=grant_count,
            **self._get_context_kwargs(),
        )

    def configuration_import_failed(self, tenant_id: str, error: str) -> None:
        self._logger.error(
            "configuration_import_failed",
            tenant_id=tenant_id,
            error=error,
            **self._get_context_kwargs(),
        )
