"""View selection endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from branchlift.runtime.deps import Context
from branchlift.runtime.models.api import NavigateRequest, WorkspaceSnapshot

router = APIRouter(prefix="/view", tags=["view"])


@router.get("", response_model=WorkspaceSnapshot)
async def get_view(context: Context) -> WorkspaceSnapshot:
    """Current view, account and in-memory collections."""
    return context.snapshot()


@router.post("/navigate", response_model=WorkspaceSnapshot)
async def navigate(body: NavigateRequest, context: Context) -> WorkspaceSnapshot:
    """Switch view.  Views that need a session fall back to ``login`` when logged out."""
    context.navigate(body.view)
    return context.snapshot()
