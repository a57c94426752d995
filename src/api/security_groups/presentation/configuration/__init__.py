"""Configuration export/import presentation layer."""

from security_groups.presentation.configuration.routes import router

__all__ = ["router"]
