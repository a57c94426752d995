"""Record access grant presentation layer."""

from security_groups.presentation.records.routes import router

__all__ = ["router"]
