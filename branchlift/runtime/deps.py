"""FastAPI dependency injection for the client context.

Usage in route handlers::

    @router.get("/things")
    async def list_things(workspace: ActiveWorkspace) -> list[Thing]:
        ...

``ActiveWorkspace`` raises HTTP 401 when nobody is logged in.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from branchlift.runtime.context import ClientContext
from branchlift.runtime.errors import NotAuthenticatedError
from branchlift.runtime.managers.workspace import WorkspaceStore


def get_context(request: Request) -> ClientContext:
    """Return the process-wide client context set up by the lifespan."""
    context: ClientContext | None = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Client context not initialised.",
        )
    return context


def get_workspace(context: Annotated[ClientContext, Depends(get_context)]) -> WorkspaceStore:
    try:
        return context.require_workspace()
    except NotAuthenticatedError as exc:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from None


# -- Annotated type aliases for concise route signatures ---------------------

Context = Annotated[ClientContext, Depends(get_context)]
"""Annotated dependency: the client context."""

ActiveWorkspace = Annotated[WorkspaceStore, Depends(get_workspace)]
"""Annotated dependency: the logged-in account's workspace (401 otherwise)."""
