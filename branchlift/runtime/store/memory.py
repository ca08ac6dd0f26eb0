"""In-memory key/value store.

Values are kept as JSON text, not live objects, so callers get the same
copy-on-read behaviour as the filesystem backend.  Contents vanish with the
process; used by tests and ``BRANCHLIFT_STATE_STORE=memory``.
"""

from __future__ import annotations

import json
from typing import Any

from branchlift.runtime.store.base import validate_key


class MemoryKeyValueStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(validate_key(key))
        return None if raw is None else json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        self._data[validate_key(key)] = json.dumps(value)

    async def delete(self, key: str) -> None:
        self._data.pop(validate_key(key), None)

    async def exists(self, key: str) -> bool:
        return validate_key(key) in self._data
