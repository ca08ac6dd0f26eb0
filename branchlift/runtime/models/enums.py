"""Shared enumerations."""

from __future__ import annotations

from enum import StrEnum


class EnvironmentStatus(StrEnum):
    """Lifecycle of a preview environment.

    ``ERROR`` is part of the persisted vocabulary and is rendered by clients,
    but nothing in the runtime ever sets it.
    """

    BUILDING = "building"
    RUNNING = "running"
    ERROR = "error"


class View(StrEnum):
    """Named screens the presentation layer can show."""

    LOGIN = "login"
    SIGNUP = "signup"
    DASHBOARD = "dashboard"
    REPOSITORIES = "repositories"
    BRANCHES = "branches"
    ENVIRONMENTS = "environments"

    @property
    def requires_session(self) -> bool:
        return self not in (View.LOGIN, View.SIGNUP)
