"""Branch endpoints.  Read-only."""

from __future__ import annotations

from fastapi import APIRouter

from branchlift.runtime.deps import ActiveWorkspace
from branchlift.runtime.models.workspace import Branch

router = APIRouter(prefix="/branches", tags=["branches"])


@router.get("/list", response_model=list[Branch])
async def list_branches(workspace: ActiveWorkspace) -> list[Branch]:
    """Persisted branches, or the sample branches if none are stored."""
    return await workspace.load_branches()
