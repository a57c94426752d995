"""Security group hierarchy presentation layer."""

from security_groups.presentation.groups.routes import router

__all__ = ["router"]
