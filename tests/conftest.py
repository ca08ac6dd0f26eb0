"""Shared test fixtures: isolated settings, in-memory store, fake GitHub.

Nothing here touches the network.  GitHub is replaced by an
``httpx.MockTransport`` that knows a handful of repositories and answers
404 for everything else.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import httpx
import pytest

from branchlift.runtime.context import ClientContext
from branchlift.runtime.github import GitHubLookup
from branchlift.runtime.settings import get_settings
from branchlift.runtime.store.memory import MemoryKeyValueStore

GITHUB_REPOS: dict[str, dict] = {
    "facebook/react": {
        "id": 10270250,
        "full_name": "facebook/react",
        "html_url": "https://github.com/facebook/react",
        "description": "The library for web and native user interfaces.",
    },
    "pallets/click": {
        "id": 2413598,
        "full_name": "pallets/click",
        "html_url": "https://github.com/pallets/click",
        "description": None,
    },
}


def github_handler(request: httpx.Request) -> httpx.Response:
    """Serve ``GET /repos/{owner}/{name}`` from ``GITHUB_REPOS``."""
    slug = request.url.path.removeprefix("/repos/")
    payload = GITHUB_REPOS.get(slug)
    if request.method != "GET" or payload is None:
        return httpx.Response(404, json={"message": "Not Found"})
    return httpx.Response(200, json=payload)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Point settings at a temp data root and invalidate the settings cache."""
    monkeypatch.setenv("BRANCHLIFT_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("BRANCHLIFT_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("BRANCHLIFT_BUILD_DELAY", "0.01")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Runtime building blocks
# ---------------------------------------------------------------------------


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def github_transport() -> httpx.MockTransport:
    return httpx.MockTransport(github_handler)


@pytest.fixture
async def lookup(github_transport: httpx.MockTransport) -> AsyncIterator[GitHubLookup]:
    client = GitHubLookup(transport=github_transport)
    yield client
    await client.aclose()


@pytest.fixture
async def context(kv: MemoryKeyValueStore, lookup: GitHubLookup) -> AsyncIterator[ClientContext]:
    """A client context over the in-memory store with a 10ms build delay."""
    ctx = ClientContext(kv, lookup=lookup, build_delay=0.01)
    await ctx.startup()
    yield ctx
    await ctx.shutdown()
