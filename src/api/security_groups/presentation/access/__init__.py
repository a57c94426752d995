"""Permission check presentation layer."""

from security_groups.presentation.access.routes import router

__all__ = ["router"]
