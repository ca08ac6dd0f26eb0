"""Data models for the BranchLift runtime."""

from branchlift.runtime.models.account import Account
from branchlift.runtime.models.api import (
    AccountResponse,
    EnvironmentCreate,
    LoginRequest,
    NavigateRequest,
    PasswordCheckRequest,
    PasswordStrengthResponse,
    RepositorySearchRequest,
    RepositorySearchResponse,
    SessionResponse,
    SignupRequest,
    WorkspaceSnapshot,
)
from branchlift.runtime.models.enums import EnvironmentStatus, View
from branchlift.runtime.models.workspace import Branch, Environment, Repository

__all__ = [
    "Account",
    # API schemas
    "AccountResponse",
    "Branch",
    "Environment",
    "EnvironmentCreate",
    # Enums
    "EnvironmentStatus",
    "LoginRequest",
    "NavigateRequest",
    "PasswordCheckRequest",
    "PasswordStrengthResponse",
    "Repository",
    "RepositorySearchRequest",
    "RepositorySearchResponse",
    "SessionResponse",
    "SignupRequest",
    "View",
    "WorkspaceSnapshot",
]
