"""Domain exceptions raised by the runtime.

Managers raise these, never HTTP exceptions; routers and the CLI translate
them into responses and exit codes.  Every one of them is recoverable: the
state that existed before the failing call is left untouched.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when local input fails a precondition (blank name, weak password...)."""


class DuplicateEmailError(ValueError):
    """Raised when registering an email that is already in the directory."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("Email already registered")


class InvalidCredentialsError(PermissionError):
    """Raised when no account matches an email/password pair.

    The message is the same whether or not the email exists.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class NotAuthenticatedError(PermissionError):
    """Raised when a workspace operation is attempted with no active session."""

    def __init__(self) -> None:
        super().__init__("Not logged in")


class RepositoryLookupError(LookupError):
    """Raised when a GitHub repository cannot be fetched, for any reason."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__("Repository not found or GitHub API error")
