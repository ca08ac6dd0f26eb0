"""Key/value store implementations for client state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from branchlift.runtime.store.base import KeyValueStore
from branchlift.runtime.store.local import LocalKeyValueStore
from branchlift.runtime.store.memory import MemoryKeyValueStore

if TYPE_CHECKING:
    from branchlift.runtime.settings import BranchliftSettings

__all__ = ["KeyValueStore", "LocalKeyValueStore", "MemoryKeyValueStore", "create_store"]


def create_store(settings: BranchliftSettings) -> KeyValueStore:
    """Create the key/value backend selected by ``state_store``."""
    if settings.state_store == "memory":
        return MemoryKeyValueStore()
    return LocalKeyValueStore(settings.data_root, prefix=settings.data_prefix)
