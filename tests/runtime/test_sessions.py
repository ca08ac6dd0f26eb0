"""Unit tests for SessionStore (in-memory key/value store, no HTTP)."""

from __future__ import annotations

import asyncio

import pytest

from branchlift.runtime.errors import DuplicateEmailError, InvalidCredentialsError, ValidationError
from branchlift.runtime.managers.sessions import ACCOUNT_DIRECTORY_KEY, CURRENT_SESSION_KEY, SessionStore
from branchlift.runtime.models.account import Account
from branchlift.runtime.store.memory import MemoryKeyValueStore


@pytest.fixture
def sessions(kv: MemoryKeyValueStore) -> SessionStore:
    return SessionStore(kv)


# ---------------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------------


async def test_register_creates_account_and_session(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    account = await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")

    assert account.name == "Ana"
    assert account.email == "ana@x.com"
    assert account.id > 0
    assert sessions.current == account

    directory = await sessions.list_accounts()
    assert directory == [account]

    # Both the directory and the session pointer are persisted.
    assert await kv.get(CURRENT_SESSION_KEY) == account.model_dump(mode="json", by_alias=True)
    assert len(await kv.get(ACCOUNT_DIRECTORY_KEY)) == 1


async def test_accounts_persist_created_at_key(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    account = await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")

    stored = (await kv.get(ACCOUNT_DIRECTORY_KEY))[0]
    assert "createdAt" in stored
    assert "created_at" not in stored
    assert (await kv.get(CURRENT_SESSION_KEY))["createdAt"] == stored["createdAt"]

    # Records written with the field name still load.
    stored["created_at"] = stored.pop("createdAt")
    await kv.set(ACCOUNT_DIRECTORY_KEY, [stored])
    assert await sessions.list_accounts() == [account]


async def test_register_weak_password(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    with pytest.raises(ValidationError, match="requirements"):
        await sessions.register("Ana", "ana@x.com", "abcdef1", "abcdef1")

    assert sessions.current is None
    assert await kv.get(ACCOUNT_DIRECTORY_KEY) is None


async def test_register_password_mismatch_checked_first(sessions: SessionStore) -> None:
    # Weak *and* mismatched: the mismatch is reported.
    with pytest.raises(ValidationError, match="do not match"):
        await sessions.register("Ana", "ana@x.com", "abc", "abd")
    assert await sessions.list_accounts() == []


async def test_register_duplicate_email(sessions: SessionStore) -> None:
    await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")

    with pytest.raises(DuplicateEmailError) as exc_info:
        await sessions.register("Other Ana", "ana@x.com", "Zyxwvu9", "Zyxwvu9")

    assert exc_info.value.email == "ana@x.com"
    matching = [a for a in await sessions.list_accounts() if a.email == "ana@x.com"]
    assert len(matching) == 1
    assert matching[0].name == "Ana"


async def test_concurrent_duplicate_registration(sessions: SessionStore) -> None:
    results = await asyncio.gather(
        sessions.register("A", "same@x.com", "Abcdef1", "Abcdef1"),
        sessions.register("B", "same@x.com", "Abcdef1", "Abcdef1"),
        return_exceptions=True,
    )

    assert sum(isinstance(r, Account) for r in results) == 1
    assert sum(isinstance(r, DuplicateEmailError) for r in results) == 1
    assert len(await sessions.list_accounts()) == 1


async def test_ids_are_unique(sessions: SessionStore) -> None:
    for i in range(5):
        await sessions.register(f"U{i}", f"u{i}@x.com", "Abcdef1", "Abcdef1")

    ids = [a.id for a in await sessions.list_accounts()]
    assert len(set(ids)) == 5
    assert ids == sorted(ids)


async def test_register_without_activation(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    await sessions.register("Demo", "demo@example.com", "Senha123", "Senha123", activate=False)

    assert sessions.current is None
    assert await kv.get(CURRENT_SESSION_KEY) is None
    assert len(await sessions.list_accounts()) == 1


# ---------------------------------------------------------------------------
# Authenticate
# ---------------------------------------------------------------------------


async def test_authenticate(sessions: SessionStore) -> None:
    created = await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")
    await sessions.logout()

    account = await sessions.authenticate("ana@x.com", "Abcdef1")
    assert account == created
    assert sessions.current == created


async def test_authenticate_wrong_password(sessions: SessionStore) -> None:
    await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")
    await sessions.logout()

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        await sessions.authenticate("ana@x.com", "wrong")
    assert sessions.current is None

    with pytest.raises(InvalidCredentialsError) as unknown_email:
        await sessions.authenticate("nobody@x.com", "Abcdef1")

    # Same message either way.
    assert str(wrong_password.value) == str(unknown_email.value)


async def test_authenticate_is_exact_match(sessions: SessionStore) -> None:
    await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")
    await sessions.logout()

    with pytest.raises(InvalidCredentialsError):
        await sessions.authenticate("ANA@x.com", "Abcdef1")
    with pytest.raises(InvalidCredentialsError):
        await sessions.authenticate("ana@x.com", "abcdef1")


async def test_auth_latency_is_awaited(kv: MemoryKeyValueStore) -> None:
    sessions = SessionStore(kv, auth_latency=0.05)
    loop = asyncio.get_running_loop()

    started = loop.time()
    await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")
    assert loop.time() - started >= 0.04


# ---------------------------------------------------------------------------
# Restore / logout
# ---------------------------------------------------------------------------


async def test_restore_session_across_instances(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    created = await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")

    fresh = SessionStore(kv)
    assert fresh.current is None
    assert await fresh.restore_session() == created
    assert fresh.current == created


async def test_restore_without_pointer(sessions: SessionStore) -> None:
    assert await sessions.restore_session() is None
    assert sessions.current is None


async def test_restore_drops_unreadable_pointer(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    await kv.set(CURRENT_SESSION_KEY, {"id": "not-a-number"})

    assert await sessions.restore_session() is None
    assert await kv.exists(CURRENT_SESSION_KEY) is False


async def test_logout_keeps_directory(sessions: SessionStore, kv: MemoryKeyValueStore) -> None:
    await sessions.register("Ana", "ana@x.com", "Abcdef1", "Abcdef1")
    await sessions.logout()

    assert sessions.current is None
    assert await kv.get(CURRENT_SESSION_KEY) is None
    assert len(await sessions.list_accounts()) == 1

    # Logging out twice is harmless.
    await sessions.logout()
