"""Shared fixtures for HTTP API tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from branchlift.runtime.app import app
from branchlift.runtime.context import ClientContext


@pytest.fixture
async def client(context: ClientContext) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with the test context.

    The app lifespan does NOT run under ``ASGITransport``, so the context is
    pre-set on ``app.state``.
    """
    app.state.context = context

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.context = None


SIGNUP = {
    "name": "Ana",
    "email": "ana@x.com",
    "password": "Abcdef1",
    "confirm_password": "Abcdef1",
}


@pytest.fixture
async def logged_in(client: AsyncClient) -> AsyncClient:
    resp = await client.post("/api/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    return client
