"""Pydantic models for configuration import results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ImportConfigurationResponse(BaseModel):
    """Result of a configuration import."""

    groups_imported: int
    id_map: dict[str, str] = Field(
        ..., description="Document group ID to the newly assigned group ID"
    )
