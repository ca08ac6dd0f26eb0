"""Per-account workspace records: repositories, branches, environments."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from branchlift.runtime.models.enums import EnvironmentStatus


class Repository(BaseModel):
    """A GitHub repository added to the workspace."""

    id: int
    name: str
    """Fully qualified ``owner/name``."""
    url: str
    description: str | None = None


class Branch(BaseModel):
    id: int
    name: str
    repository: str


class Environment(BaseModel):
    """A preview environment.  Starts ``building``, becomes ``running``."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    status: EnvironmentStatus = EnvironmentStatus.BUILDING
    created_at: datetime = Field(alias="createdAt")
