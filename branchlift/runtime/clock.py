"""Timestamps and timestamp-derived record ids."""

from __future__ import annotations

import time
from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def timestamp_id(previous: int | None = None) -> int:
    """Return the current time in milliseconds, as a record id.

    When *previous* (the newest id already in the collection) is not older
    than now, ``previous + 1`` is returned so ids stay unique and increasing.
    """
    candidate = time.time_ns() // 1_000_000
    if previous is not None and candidate <= previous:
        return previous + 1
    return candidate
