"""Session store -- the account directory and the current session pointer.

Persisted layout::

    account_directory  -> [Account, ...]
    current_session    -> Account      (absent when logged out)

Passwords are stored and compared in plaintext, exactly as entered.  This
is a demo store, not an identity provider.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from branchlift.runtime.clock import timestamp_id, utcnow
from branchlift.runtime.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from branchlift.runtime.models.account import Account
from branchlift.runtime.password import is_strong

if TYPE_CHECKING:
    from branchlift.runtime.store.base import KeyValueStore

ACCOUNT_DIRECTORY_KEY = "account_directory"
CURRENT_SESSION_KEY = "current_session"

DEMO_NAME = "Demo User"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "Senha123"  # noqa: S105

_accounts = TypeAdapter(list[Account])


class SessionStore:
    """Owns the account directory and at most one active session.

    The active account is held in memory and mirrored to
    ``current_session`` so that ``restore_session`` can pick it up after a
    restart.
    """

    def __init__(self, store: KeyValueStore, *, auth_latency: float = 0.0) -> None:
        self._store = store
        self._auth_latency = auth_latency
        self._current: Account | None = None
        self._directory_lock = asyncio.Lock()

    @property
    def current(self) -> Account | None:
        return self._current

    async def list_accounts(self) -> list[Account]:
        raw = await self._store.get(ACCOUNT_DIRECTORY_KEY)
        if raw is None:
            return []
        return _accounts.validate_python(raw)

    # -- Register --------------------------------------------------------------

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        *,
        activate: bool = True,
    ) -> Account:
        """Create an account and, unless ``activate`` is false, log it in.

        Raises ``ValidationError`` on a password mismatch or a weak password,
        ``DuplicateEmailError`` if the email is taken.
        """
        if password != confirm_password:
            msg = "Passwords do not match"
            raise ValidationError(msg)
        if not is_strong(password):
            msg = "Password does not meet the requirements"
            raise ValidationError(msg)

        await self._simulate_latency()

        # Check-then-append must not interleave with another registration.
        async with self._directory_lock:
            accounts = await self.list_accounts()
            if any(a.email == email for a in accounts):
                raise DuplicateEmailError(email)

            account = Account(
                id=timestamp_id(max((a.id for a in accounts), default=None)),
                name=name,
                email=email,
                password=password,
                created_at=utcnow(),
            )
            accounts.append(account)
            await self._store.set(
                ACCOUNT_DIRECTORY_KEY,
                _accounts.dump_python(accounts, mode="json", by_alias=True),
            )

        logger.info("Account registered: {} (id={})", email, account.id)
        if activate:
            await self._set_current(account)
        return account

    # -- Authenticate ----------------------------------------------------------

    async def authenticate(self, email: str, password: str) -> Account:
        """Log in.  Raises ``InvalidCredentialsError`` unless both fields match."""
        await self._simulate_latency()

        accounts = await self.list_accounts()
        account = next((a for a in accounts if a.email == email and a.password == password), None)
        if account is None:
            logger.info("Login rejected for {}", email)
            raise InvalidCredentialsError

        await self._set_current(account)
        logger.info("Logged in: {} (id={})", email, account.id)
        return account

    # -- Restore / logout ------------------------------------------------------

    async def restore_session(self) -> Account | None:
        """Adopt the persisted session pointer, if any, without re-checking credentials."""
        raw = await self._store.get(CURRENT_SESSION_KEY)
        if raw is None:
            return None
        try:
            account = Account.model_validate(raw)
        except SchemaError as exc:
            logger.warning("Dropping unreadable session pointer: {}", exc.error_count())
            await self._store.delete(CURRENT_SESSION_KEY)
            return None

        self._current = account
        logger.info("Session restored: {} (id={})", account.email, account.id)
        return account

    async def logout(self) -> None:
        """Forget the active account.  The directory is left untouched."""
        previous = self._current
        self._current = None
        await self._store.delete(CURRENT_SESSION_KEY)
        if previous is not None:
            logger.info("Logged out: {}", previous.email)

    # -- Internals -------------------------------------------------------------

    async def _set_current(self, account: Account) -> None:
        self._current = account
        await self._store.set(CURRENT_SESSION_KEY, account.model_dump(mode="json", by_alias=True))

    async def _simulate_latency(self) -> None:
        if self._auth_latency > 0:
            await asyncio.sleep(self._auth_latency)
