"""Environment endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from branchlift.runtime.deps import ActiveWorkspace
from branchlift.runtime.errors import ValidationError
from branchlift.runtime.models.api import EnvironmentCreate
from branchlift.runtime.models.workspace import Environment

router = APIRouter(prefix="/environments", tags=["environments"])


@router.get("/list", response_model=list[Environment])
async def list_environments(workspace: ActiveWorkspace) -> list[Environment]:
    return await workspace.load_environments()


@router.post("/create", response_model=Environment, status_code=status.HTTP_201_CREATED)
async def create_environment(body: EnvironmentCreate, workspace: ActiveWorkspace) -> Environment:
    """Create an environment in ``building`` state; it switches to ``running`` after the build delay."""
    try:
        return await workspace.create_environment(body.name)
    except ValidationError as exc:
        raise HTTPException(422, detail=str(exc)) from None
