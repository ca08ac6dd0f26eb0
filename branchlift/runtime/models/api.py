"""API request / response schemas.

These thin schemas sit between HTTP and the runtime.  ``AccountResponse``
exists so that the stored password never leaves the process.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from branchlift.runtime.models.enums import View
from branchlift.runtime.models.workspace import Branch, Environment, Repository

# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str


class PasswordCheckRequest(BaseModel):
    password: str


class PasswordStrengthResponse(BaseModel):
    has_length: bool
    has_upper: bool
    has_digit: bool
    is_strong: bool


class AccountResponse(BaseModel):
    """Serialized account returned to clients (no password)."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: str
    created_at: datetime = Field(alias="createdAt")


class SessionResponse(BaseModel):
    account: AccountResponse | None = None


# ---------------------------------------------------------------------------
# View
# ---------------------------------------------------------------------------


class NavigateRequest(BaseModel):
    view: View


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class RepositorySearchRequest(BaseModel):
    query: str = Field(description="Repository in ``owner/name`` form.")


class RepositorySearchResponse(BaseModel):
    repository: Repository
    added: bool = Field(description="False when the repository was already in the workspace.")


class EnvironmentCreate(BaseModel):
    name: str


class WorkspaceSnapshot(BaseModel):
    """Everything a client needs to render the current screen."""

    view: View
    account: AccountResponse | None = None
    repositories: list[Repository] = Field(default_factory=list)
    branches: list[Branch] = Field(default_factory=list)
    environments: list[Environment] = Field(default_factory=list)
