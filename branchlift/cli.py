import asyncio
from collections.abc import Awaitable, Callable

import click

from branchlift.runtime.context import ClientContext
from branchlift.runtime.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    RepositoryLookupError,
    ValidationError,
)
from branchlift.runtime.log import setup_logging
from branchlift.runtime.settings import get_settings

_DOMAIN_ERRORS = (
    ValidationError,
    DuplicateEmailError,
    InvalidCredentialsError,
    NotAuthenticatedError,
    RepositoryLookupError,
)


def _run(action: Callable[[ClientContext], Awaitable[None]]) -> None:
    """Run *action* against a freshly started context, then shut it down.

    Domain errors become a one-line ``Error: ...`` message and exit code 1.
    """
    settings = get_settings()
    setup_logging(settings)

    async def _main() -> None:
        context = ClientContext.from_settings(settings)
        try:
            await context.startup()
            await action(context)
        finally:
            await context.shutdown()

    try:
        asyncio.run(_main())
    except _DOMAIN_ERRORS as exc:
        raise click.ClickException(str(exc)) from None


@click.group()
def main() -> None:
    """BranchLift - preview environment orchestration demo."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from BRANCHLIFT_HOST or 127.0.0.1).")
@click.option("--port", default=None, type=int, help="Bind port (default: from BRANCHLIFT_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the HTTP API."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "branchlift.runtime.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@main.command()
@click.option("--name", prompt=True)
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.option("--confirm-password", prompt=True, hide_input=True)
def signup(name: str, email: str, password: str, confirm_password: str) -> None:
    """Create an account and log in."""

    async def _signup(context: ClientContext) -> None:
        account = await context.signup(name, email, password, confirm_password)
        click.echo(f"Welcome, {account.name}!")

    _run(_signup)


@main.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def login(email: str, password: str) -> None:
    """Log in with an existing account."""

    async def _login(context: ClientContext) -> None:
        account = await context.login(email, password)
        click.echo(f"Logged in as {account.name} <{account.email}>")

    _run(_login)


@main.command()
def logout() -> None:
    """Forget the current session."""

    async def _logout(context: ClientContext) -> None:
        await context.logout()
        click.echo("Logged out.")

    _run(_logout)


@main.command()
def whoami() -> None:
    """Show the logged-in account."""

    async def _whoami(context: ClientContext) -> None:
        account = context.account
        if account is None:
            raise NotAuthenticatedError
        click.echo(f"{account.name} <{account.email}>")

    _run(_whoami)


@main.command("demo-account")
def demo_account() -> None:
    """Register the demo account (demo@example.com / Senha123) if missing."""
    from branchlift.runtime.managers.sessions import DEMO_EMAIL, DEMO_NAME, DEMO_PASSWORD

    async def _demo(context: ClientContext) -> None:
        try:
            await context.sessions.register(DEMO_NAME, DEMO_EMAIL, DEMO_PASSWORD, DEMO_PASSWORD, activate=False)
        except DuplicateEmailError:
            click.echo(f"Demo account already exists: {DEMO_EMAIL}")
        else:
            click.echo(f"Demo account created: {DEMO_EMAIL} / {DEMO_PASSWORD}")

    _run(_demo)


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


@main.group()
def repos() -> None:
    """Repositories in the current workspace."""


@repos.command("list")
def list_repos() -> None:
    async def _list(context: ClientContext) -> None:
        repositories = await context.require_workspace().load_repositories()
        if not repositories:
            click.echo("No repositories yet.")
        for repo in repositories:
            click.echo(f"{repo.name}\t{repo.url}\t{repo.description or ''}")

    _run(_list)


@repos.command("add")
@click.argument("query")
def add_repo(query: str) -> None:
    """Add the GitHub repository QUERY (owner/name)."""

    async def _add(context: ClientContext) -> None:
        repository, added = await context.search_repository(query)
        if added:
            click.echo(f"Added {repository.name}")
        else:
            click.echo(f"{repository.name} is already in the workspace")

    _run(_add)


@main.command()
def branches() -> None:
    """List branches in the current workspace."""

    async def _branches(context: ClientContext) -> None:
        for branch in await context.require_workspace().load_branches():
            click.echo(f"{branch.repository}\t{branch.name}")

    _run(_branches)


@main.group()
def envs() -> None:
    """Preview environments in the current workspace."""


@envs.command("list")
def list_envs() -> None:
    async def _list(context: ClientContext) -> None:
        environments = await context.require_workspace().load_environments()
        if not environments:
            click.echo("No environments yet.")
        for env in environments:
            click.echo(f"{env.name}\t{env.status}\t{env.created_at:%Y-%m-%d}")

    _run(_list)


@envs.command("create")
@click.argument("name")
@click.option("--wait/--no-wait", default=True, help="Wait for the build to finish (default: wait).")
def create_env(name: str, wait: bool) -> None:
    """Create the environment NAME."""

    async def _create(context: ClientContext) -> None:
        environment = await context.create_environment(name)
        click.echo(f"Environment {environment.name} is {environment.status}")
        if wait:
            workspace = context.require_workspace()
            await workspace.wait_for_builds()
            ready = next(e for e in workspace.environments if e.id == environment.id)
            click.echo(f"Environment {ready.name} is {ready.status}")

    _run(_create)


if __name__ == "__main__":
    main()
