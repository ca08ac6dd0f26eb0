"""Client context -- the single object a presentation layer talks to.

Replaces module-level "current user" and "current collections" globals with
an explicit object that has a clear lifecycle:

- ``startup``: restore a persisted session and load its workspace
- ``signup`` / ``login``: open the workspace of the new session
- ``logout``: close the workspace (cancelling builds) and clear the session
- ``shutdown``: release the HTTP client and any pending builds

It also tracks which named view should be shown, so both the HTTP API and
the CLI render from the same state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from branchlift.runtime.errors import NotAuthenticatedError, ValidationError
from branchlift.runtime.github import GitHubLookup
from branchlift.runtime.managers.sessions import SessionStore
from branchlift.runtime.managers.workspace import DEFAULT_BUILD_DELAY, WorkspaceStore
from branchlift.runtime.models.api import AccountResponse, WorkspaceSnapshot
from branchlift.runtime.models.enums import View
from branchlift.runtime.store import create_store

if TYPE_CHECKING:
    from branchlift.runtime.models.account import Account
    from branchlift.runtime.models.workspace import Environment, Repository
    from branchlift.runtime.settings import BranchliftSettings
    from branchlift.runtime.store.base import KeyValueStore


class ClientContext:
    """Session, workspace and view state for one client."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        lookup: GitHubLookup | None = None,
        build_delay: float = DEFAULT_BUILD_DELAY,
        auth_latency: float = 0.0,
    ) -> None:
        self.store = store
        self.sessions = SessionStore(store, auth_latency=auth_latency)
        self.lookup = lookup or GitHubLookup()
        self.build_delay = build_delay
        self.workspace: WorkspaceStore | None = None
        self.view = View.LOGIN

    @classmethod
    def from_settings(cls, settings: BranchliftSettings) -> ClientContext:
        return cls(
            create_store(settings),
            lookup=GitHubLookup(settings.github_api_url, timeout=settings.lookup_timeout),
            build_delay=settings.build_delay,
            auth_latency=settings.auth_latency,
        )

    @property
    def account(self) -> Account | None:
        return self.sessions.current

    # -- Lifecycle -------------------------------------------------------------

    async def startup(self) -> Account | None:
        """Restore a persisted session, if any, and land on the matching view."""
        account = await self.sessions.restore_session()
        if account is None:
            self.view = View.LOGIN
            return None
        await self._open_workspace(account)
        return account

    async def shutdown(self) -> None:
        """Cancel pending builds and close the HTTP client.  The session stays persisted."""
        if self.workspace is not None:
            await self.workspace.close()
            self.workspace = None
        await self.lookup.aclose()

    # -- Session ---------------------------------------------------------------

    async def signup(self, name: str, email: str, password: str, confirm_password: str) -> Account:
        account = await self.sessions.register(name, email, password, confirm_password)
        await self._open_workspace(account)
        return account

    async def login(self, email: str, password: str) -> Account:
        account = await self.sessions.authenticate(email, password)
        await self._open_workspace(account)
        return account

    async def logout(self) -> None:
        if self.workspace is not None:
            await self.workspace.close()
            self.workspace = None
        await self.sessions.logout()
        self.view = View.LOGIN

    # -- Navigation ------------------------------------------------------------

    def navigate(self, view: View) -> View:
        """Switch view, redirecting to whatever the session state allows."""
        if self.account is None:
            self.view = view if not view.requires_session else View.LOGIN
        else:
            self.view = view if view.requires_session else View.DASHBOARD
        return self.view

    # -- Workspace -------------------------------------------------------------

    def require_workspace(self) -> WorkspaceStore:
        """Return the open workspace.  Raises ``NotAuthenticatedError`` if logged out."""
        if self.workspace is None:
            raise NotAuthenticatedError
        return self.workspace

    async def search_repository(self, query: str) -> tuple[Repository, bool]:
        """Look up ``owner/name`` on GitHub and add it to the workspace.

        Returns the repository and whether it was newly added.
        """
        workspace = self.require_workspace()
        if not query.strip():
            msg = "Repository name is required"
            raise ValidationError(msg)
        repository = await self.lookup.fetch(query)
        added = await workspace.add_repository(repository)
        return repository, added

    async def create_environment(self, name: str) -> Environment:
        return await self.require_workspace().create_environment(name)

    def snapshot(self) -> WorkspaceSnapshot:
        """Everything needed to render the current view."""
        account = self.account
        snapshot = WorkspaceSnapshot(
            view=self.view,
            account=AccountResponse.model_validate(account) if account is not None else None,
        )
        if self.workspace is not None:
            snapshot.repositories = self.workspace.repositories
            snapshot.branches = self.workspace.branches
            snapshot.environments = self.workspace.environments
        return snapshot

    # -- Internals -------------------------------------------------------------

    async def _open_workspace(self, account: Account) -> None:
        if self.workspace is not None:
            await self.workspace.close()
        workspace = WorkspaceStore(self.store, account.id, build_delay=self.build_delay)
        await workspace.load_all()
        self.workspace = workspace
        self.view = View.DASHBOARD
        logger.debug("Workspace opened for account {}", account.id)
