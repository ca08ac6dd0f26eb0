"""Local filesystem key/value store.

Stores one JSON file per key under the data root with optional namespace
prefix::

    {data_root}/{prefix}/kv/{key}.json

When prefix is None, the path collapses to::

    {data_root}/kv/{key}.json

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.  Writes are
atomic: data is written to a temporary file in the same directory, then
renamed over the target, so a reader never sees a half-written value.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from functools import partial
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger

from branchlift.runtime.store.base import validate_key


class LocalKeyValueStore:
    """Local filesystem implementation of the KeyValueStore protocol."""

    def __init__(self, data_root: str | Path, prefix: str | None = None) -> None:
        base = Path(data_root)
        if prefix:
            base = base / prefix
        self._base = base / "kv"

    def _path(self, key: str) -> Path:
        return self._base / f"{validate_key(key)}.json"

    async def get(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            raw = await to_thread.run_sync(partial(_read_file, path))
        except FileNotFoundError:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        data = json.dumps(value, ensure_ascii=False, indent=2)
        await to_thread.run_sync(partial(_atomic_write, path, data))
        logger.debug("Store: wrote {} ({} bytes)", key, len(data))

    async def delete(self, key: str) -> None:
        path = self._path(key)
        await to_thread.run_sync(partial(_unlink, path))

    async def exists(self, key: str) -> bool:
        path = self._path(key)
        return await to_thread.run_sync(path.exists)


# -- Sync helpers (run in thread pool) -----------------------------------------


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def _read_file(path: Path) -> str:
    """Read file contents.  Raises ``FileNotFoundError`` if missing."""
    return path.read_text(encoding="utf-8")


def _unlink(path: Path) -> None:
    path.unlink(missing_ok=True)
