"""Repository endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from branchlift.runtime.deps import ActiveWorkspace, Context
from branchlift.runtime.errors import RepositoryLookupError, ValidationError
from branchlift.runtime.models.api import RepositorySearchRequest, RepositorySearchResponse
from branchlift.runtime.models.workspace import Repository

router = APIRouter(prefix="/repositories", tags=["repositories"])


@router.get("/list", response_model=list[Repository])
async def list_repositories(workspace: ActiveWorkspace) -> list[Repository]:
    return await workspace.load_repositories()


@router.post("/search", response_model=RepositorySearchResponse)
async def search_repository(
    body: RepositorySearchRequest,
    context: Context,
    _workspace: ActiveWorkspace,
) -> RepositorySearchResponse:
    """Look up ``owner/name`` on GitHub and add it to the workspace (idempotent by id)."""
    try:
        repository, added = await context.search_repository(body.query)
    except ValidationError as exc:
        raise HTTPException(422, detail=str(exc)) from None
    except RepositoryLookupError as exc:
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from None
    return RepositorySearchResponse(repository=repository, added=added)
