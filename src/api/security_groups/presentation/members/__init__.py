"""Group membership presentation layer."""

from security_groups.presentation.members.routes import router

__all__ = ["router"]
