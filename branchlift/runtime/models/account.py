"""Account data model.

Accounts live in the ``account_directory`` key as a JSON list; the same shape
is written to ``current_session`` for the active account.  Records are
persisted by alias (``createdAt``) and accept either spelling on load.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """A registered user.  The password is stored as entered."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    password: str
    created_at: datetime = Field(alias="createdAt")
