"""GitHub repository lookup.

One unauthenticated ``GET /repos/{owner}/{name}`` against the public API.
Every failure -- bad input, timeout, 404, rate limit, unexpected payload --
surfaces as a single ``RepositoryLookupError`` with a generic message.  The
timeout caps the whole exchange, not each phase of it.  No retry, backoff or
caching.
"""

from __future__ import annotations

import re

import anyio
import httpx
from loguru import logger

from branchlift.runtime.errors import RepositoryLookupError
from branchlift.runtime.models.workspace import Repository

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 5.0

_SEGMENT = re.compile(r"^[A-Za-z0-9_.-]+$")


def parse_slug(query: str) -> tuple[str, str]:
    """Split ``owner/name`` into its parts.  Raises ``RepositoryLookupError``."""
    parts = query.strip().split("/")
    if len(parts) != 2 or not all(_SEGMENT.match(p) and p not in (".", "..") for p in parts):
        raise RepositoryLookupError(query)
    return parts[0], parts[1]


class GitHubLookup:
    """Async client for the repository metadata endpoint.

    ``transport`` is passed straight to ``httpx.AsyncClient``; tests inject an
    ``httpx.MockTransport`` there.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=api_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/vnd.github+json"},
        )

    async def fetch(self, query: str) -> Repository:
        """Fetch ``owner/name`` and map it to a ``Repository``."""
        owner, name = parse_slug(query)
        try:
            with anyio.fail_after(self._timeout):
                response = await self._client.get(f"/repos/{owner}/{name}")
            response.raise_for_status()
            payload = response.json()
            repository = Repository(
                id=payload["id"],
                name=payload["full_name"],
                url=payload["html_url"],
                description=payload.get("description"),
            )
        except (httpx.HTTPError, TimeoutError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("GitHub lookup failed for {}/{}: {!r}", owner, name, exc)
            raise RepositoryLookupError(query) from exc

        logger.debug("GitHub lookup: {} -> id={}", repository.name, repository.id)
        return repository

    async def aclose(self) -> None:
        await self._client.aclose()
