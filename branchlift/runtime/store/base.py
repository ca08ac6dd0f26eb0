"""Key/value store interface for client state.

Every piece of BranchLift state is a JSON value stored under a flat key
(``account_directory``, ``workspace_envs_<id>``...).  Writes replace the whole
value; there are no partial updates.  The interface is async so the local
backend can push file I/O off the event loop.
"""

from __future__ import annotations

import re
from typing import Any, Protocol, runtime_checkable

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_key(key: str) -> str:
    """Return *key* unchanged.  Raises ``ValueError`` if it is not a safe key."""
    if not _KEY_PATTERN.match(key) or key in (".", ".."):
        msg = f"Invalid store key: {key!r}"
        raise ValueError(msg)
    return key


@runtime_checkable
class KeyValueStore(Protocol):
    """Async protocol for reading and writing JSON values by key."""

    async def get(self, key: str) -> Any | None:
        """Return the decoded value, or ``None`` if the key is absent."""
        ...

    async def set(self, key: str, value: Any) -> None:
        """Replace the value stored under *key*."""
        ...

    async def delete(self, key: str) -> None:
        """Remove *key*.  No-op if absent."""
        ...

    async def exists(self, key: str) -> bool:
        ...
