"""CLI tests: each invocation starts a fresh context over the local store."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from functools import partial

import httpx
import pytest
from click.testing import CliRunner
from loguru import logger

from branchlift.cli import main
from branchlift.runtime import context as context_module
from branchlift.runtime.github import GitHubLookup


@pytest.fixture(autouse=True)
def _restore_loguru() -> Iterator[None]:
    """The CLI installs a sink on the runner's stderr; put the default back."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture(autouse=True)
def _fake_github(monkeypatch: pytest.MonkeyPatch, github_transport: httpx.MockTransport) -> None:
    monkeypatch.setattr(context_module, "GitHubLookup", partial(GitHubLookup, transport=github_transport))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _signup(runner: CliRunner) -> None:
    result = runner.invoke(
        main,
        ["signup", "--name", "Ana", "--email", "ana@x.com", "--password", "Abcdef1", "--confirm-password", "Abcdef1"],
    )
    assert result.exit_code == 0, result.output
    assert "Welcome, Ana!" in result.output


def test_signup_whoami_logout(runner: CliRunner) -> None:
    _signup(runner)

    result = runner.invoke(main, ["whoami"])
    assert result.exit_code == 0
    assert "Ana <ana@x.com>" in result.output

    result = runner.invoke(main, ["logout"])
    assert result.exit_code == 0

    result = runner.invoke(main, ["whoami"])
    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_login(runner: CliRunner) -> None:
    _signup(runner)
    runner.invoke(main, ["logout"])

    result = runner.invoke(main, ["login", "--email", "ana@x.com", "--password", "nope"])
    assert result.exit_code == 1
    assert "Invalid email or password" in result.output

    result = runner.invoke(main, ["login", "--email", "ana@x.com", "--password", "Abcdef1"])
    assert result.exit_code == 0
    assert "Logged in as Ana" in result.output


def test_signup_weak_password(runner: CliRunner) -> None:
    result = runner.invoke(
        main,
        ["signup", "--name", "Ana", "--email", "ana@x.com", "--password", "abc", "--confirm-password", "abc"],
    )
    assert result.exit_code == 1
    assert "Password does not meet the requirements" in result.output


def test_workspace_commands_require_login(runner: CliRunner) -> None:
    result = runner.invoke(main, ["repos", "list"])
    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_repos(runner: CliRunner) -> None:
    _signup(runner)

    result = runner.invoke(main, ["repos", "list"])
    assert "No repositories yet." in result.output

    result = runner.invoke(main, ["repos", "add", "facebook/react"])
    assert result.exit_code == 0
    assert "Added facebook/react" in result.output

    result = runner.invoke(main, ["repos", "add", "facebook/react"])
    assert "already in the workspace" in result.output

    result = runner.invoke(main, ["repos", "add", "nobody/nothing"])
    assert result.exit_code == 1
    assert "Repository not found" in result.output

    result = runner.invoke(main, ["repos", "list"])
    assert "https://github.com/facebook/react" in result.output


def test_branches(runner: CliRunner) -> None:
    _signup(runner)
    result = runner.invoke(main, ["branches"])
    assert result.exit_code == 0
    assert "facebook/react\tmain" in result.output
    assert "facebook/react\tdevelop" in result.output


def test_envs(runner: CliRunner) -> None:
    _signup(runner)

    result = runner.invoke(main, ["envs", "create", "preview-1"])
    assert result.exit_code == 0, result.output
    assert "Environment preview-1 is building" in result.output
    assert "Environment preview-1 is running" in result.output

    result = runner.invoke(main, ["envs", "create", "preview-2", "--no-wait"])
    assert "is running" not in result.output

    result = runner.invoke(main, ["envs", "list"])
    assert "preview-1\trunning" in result.output
    assert "preview-2\tbuilding" in result.output


def test_demo_account(runner: CliRunner) -> None:
    result = runner.invoke(main, ["demo-account"])
    assert "Demo account created: demo@example.com" in result.output

    result = runner.invoke(main, ["demo-account"])
    assert "already exists" in result.output

    result = runner.invoke(main, ["login", "--email", "demo@example.com", "--password", "Senha123"])
    assert result.exit_code == 0
