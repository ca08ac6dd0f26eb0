"""Workspace store -- one account's repositories, branches and environments.

Persisted layout (one key per collection, whole-list writes)::

    workspace_repos_<account_id>     -> [Repository, ...]
    workspace_branches_<account_id>  -> [Branch, ...]
    workspace_envs_<account_id>      -> [Environment, ...]

Loads, mutations and the deferred build step all run under one lock, so a
reload can never interleave with a half-finished mutation and the last write
of a collection always reflects its latest in-memory state.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import TypeAdapter

from branchlift.runtime.clock import timestamp_id, utcnow
from branchlift.runtime.errors import ValidationError
from branchlift.runtime.models.enums import EnvironmentStatus
from branchlift.runtime.models.workspace import Branch, Environment, Repository
from branchlift.runtime.scheduler import BuildScheduler

if TYPE_CHECKING:
    from branchlift.runtime.store.base import KeyValueStore

DEFAULT_BUILD_DELAY = 2.0

# Shown until the account has persisted branches of its own.  There is no
# branch sync; these are demo placeholders.
SAMPLE_BRANCHES: tuple[Branch, ...] = (
    Branch(id=1, name="main", repository="facebook/react"),
    Branch(id=2, name="develop", repository="facebook/react"),
)

_repositories = TypeAdapter(list[Repository])
_branches = TypeAdapter(list[Branch])
_environments = TypeAdapter(list[Environment])


def repositories_key(account_id: int) -> str:
    return f"workspace_repos_{account_id}"


def branches_key(account_id: int) -> str:
    return f"workspace_branches_{account_id}"


def environments_key(account_id: int) -> str:
    return f"workspace_envs_{account_id}"


class WorkspaceStore:
    """The three collections of a single account.

    The scheduler passed in (or created here) is dedicated to this
    workspace; ``close`` cancels everything on it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        account_id: int,
        *,
        build_delay: float = DEFAULT_BUILD_DELAY,
        scheduler: BuildScheduler | None = None,
    ) -> None:
        self._store = store
        self.account_id = account_id
        self.build_delay = build_delay
        self.scheduler = scheduler or BuildScheduler()
        self._lock = asyncio.Lock()
        self._closed = False

        self._repositories: list[Repository] = []
        self._branches: list[Branch] = []
        self._environments: list[Environment] = []

    # -- Snapshots -------------------------------------------------------------

    @property
    def repositories(self) -> list[Repository]:
        return list(self._repositories)

    @property
    def branches(self) -> list[Branch]:
        return list(self._branches)

    @property
    def environments(self) -> list[Environment]:
        return list(self._environments)

    # -- Load ------------------------------------------------------------------

    async def load_repositories(self) -> list[Repository]:
        async with self._lock:
            raw = await self._store.get(repositories_key(self.account_id))
            self._repositories = [] if raw is None else _repositories.validate_python(raw)
        return self.repositories

    async def load_branches(self) -> list[Branch]:
        """Persisted branches, or the two sample branches when none are stored."""
        async with self._lock:
            raw = await self._store.get(branches_key(self.account_id))
            if raw is None:
                self._branches = [b.model_copy() for b in SAMPLE_BRANCHES]
            else:
                self._branches = _branches.validate_python(raw)
        return self.branches

    async def load_environments(self) -> list[Environment]:
        """Replace the in-memory environments with the persisted ones.

        Pending builds whose environment is no longer present are cancelled.
        """
        async with self._lock:
            raw = await self._store.get(environments_key(self.account_id))
            self._environments = [] if raw is None else _environments.validate_python(raw)

            present = {env.id for env in self._environments}
            for env_id in self.scheduler.pending_ids:
                if env_id not in present:
                    self.scheduler.cancel(env_id)
        return self.environments

    async def load_all(self) -> None:
        await self.load_repositories()
        await self.load_branches()
        await self.load_environments()

    # -- Repositories ----------------------------------------------------------

    async def add_repository(self, repository: Repository) -> bool:
        """Append *repository* unless its id is already present.

        Returns ``True`` if the collection changed.
        """
        async with self._lock:
            if any(r.id == repository.id for r in self._repositories):
                logger.debug("Repository {} already in workspace {}", repository.id, self.account_id)
                return False
            repositories = [*self._repositories, repository]
            await self._store.set(
                repositories_key(self.account_id),
                _repositories.dump_python(repositories, mode="json"),
            )
            self._repositories = repositories

        logger.info("Repository added: {} (account={})", repository.name, self.account_id)
        return True

    # -- Environments ----------------------------------------------------------

    async def create_environment(self, name: str) -> Environment:
        """Create a ``building`` environment and schedule its transition to ``running``.

        Raises ``ValidationError`` if *name* is blank.
        """
        if not name.strip():
            msg = "Environment name is required"
            raise ValidationError(msg)

        async with self._lock:
            previous = max((e.id for e in self._environments), default=None)
            environment = Environment(
                id=timestamp_id(previous),
                name=name,
                status=EnvironmentStatus.BUILDING,
                created_at=utcnow(),
            )
            await self._write_environments([*self._environments, environment])

            if not self._closed:
                self.scheduler.schedule(
                    environment.id,
                    self.build_delay,
                    partial(self._complete_build, environment.id),
                )

        logger.info("Environment created: {} (id={}, account={})", name, environment.id, self.account_id)
        return environment

    async def _complete_build(self, env_id: int) -> None:
        """Flip *env_id* to running.  No-op if it is no longer in the collection."""
        async with self._lock:
            for index, env in enumerate(self._environments):
                if env.id == env_id:
                    break
            else:
                logger.debug("Build finished for missing environment {}; ignored", env_id)
                return

            environments = list(self._environments)
            environments[index] = env.model_copy(update={"status": EnvironmentStatus.RUNNING})
            await self._write_environments(environments)

        logger.info("Environment ready: {} (id={})", env.name, env_id)

    async def _write_environments(self, environments: list[Environment]) -> None:
        """Persist *environments*, then adopt them.  A failed write changes nothing."""
        await self._store.set(
            environments_key(self.account_id),
            _environments.dump_python(environments, mode="json", by_alias=True),
        )
        self._environments = environments

    # -- Lifecycle -------------------------------------------------------------

    async def wait_for_builds(self, timeout: float | None = None) -> bool:
        return await self.scheduler.wait_until_drained(timeout=timeout)

    async def close(self) -> None:
        """Cancel pending builds and drop the in-memory collections."""
        self._closed = True
        cancelled = self.scheduler.cancel_all()
        if cancelled:
            logger.debug("Workspace {} closed with {} builds cancelled", self.account_id, cancelled)
        self._repositories = []
        self._branches = []
        self._environments = []
