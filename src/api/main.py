"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_cache_settings, get_settings
from infrastructure.version import __version__
from security_groups.dependencies.cache import close_permission_cache
from security_groups.presentation import router as security_groups_router


@asynccontextmanager
async def security_groups_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engines and the permission cache (created lazily, closed on
      shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_started(
        version=__version__, cache_backend=get_cache_settings().backend
    )

    yield

    await close_permission_cache()
    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Security Groups API",
    description="Hierarchical security groups with record-level access control",
    version=__version__,
    lifespan=security_groups_lifespan,
)

# Include Security Groups bounded context routes
app.include_router(security_groups_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_read_session)],
) -> dict:
    """Check database connection health."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except Exception as e:
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }
