"""FastAPI application serving one client context per process."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRouter
from loguru import logger

from branchlift import __version__
from branchlift.runtime.context import ClientContext
from branchlift.runtime.log import setup_logging
from branchlift.runtime.settings import get_settings


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings)

    logger.info("BranchLift starting (host={}, port={})", settings.host, settings.port)
    prefix_info = f", prefix={settings.data_prefix}" if settings.data_prefix else ""
    logger.info("Data root: {} (store={}{})", settings.data_root, settings.state_store, prefix_info)

    context = ClientContext.from_settings(settings)
    account = await context.startup()
    if account is not None:
        logger.info("Resumed session for {}", account.email)
    _app.state.context = context

    yield

    # -- Shutdown --------------------------------------------------------------
    pending = context.workspace.scheduler.active_count if context.workspace else 0
    logger.info("BranchLift shutting down (pending_builds={})", pending)
    await context.shutdown()
    _app.state.context = None


app = FastAPI(title="BranchLift", version=__version__, lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from branchlift.runtime.routers.auth import router as auth_router  # noqa: E402
from branchlift.runtime.routers.branches import router as branches_router  # noqa: E402
from branchlift.runtime.routers.environments import router as environments_router  # noqa: E402
from branchlift.runtime.routers.repositories import router as repositories_router  # noqa: E402
from branchlift.runtime.routers.views import router as views_router  # noqa: E402

api.include_router(auth_router)
api.include_router(views_router)
api.include_router(repositories_router)
api.include_router(branches_router)
api.include_router(environments_router)

app.include_router(api)
