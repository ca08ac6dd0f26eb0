"""Service configuration loaded from BRANCHLIFT_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class BranchliftSettings(BaseSettings):
    """BranchLift settings.

    All fields are read from environment variables with the ``BRANCHLIFT_``
    prefix.  For example, ``BRANCHLIFT_BUILD_DELAY=0.5`` maps to
    ``build_delay``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BRANCHLIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    """``json`` writes one serialized record per line instead of the coloured console format."""

    # -- Data storage ----------------------------------------------------------
    data_root: str = "./data"
    """Root directory for the local key/value store."""

    data_prefix: str | None = None
    """Optional namespace inserted between ``data_root`` and the key files.

    Two prefixes under one root behave like two separate browsers.
    """

    state_store: Literal["local", "memory"] = "local"

    # -- Server ----------------------------------------------------------------
    host: str = "127.0.0.1"
    port: int = 8000

    # -- GitHub lookup ---------------------------------------------------------
    github_api_url: str = "https://api.github.com"
    lookup_timeout: float = 5.0

    # -- Simulation ------------------------------------------------------------
    build_delay: float = 2.0
    """Seconds before a new environment flips from building to running."""

    auth_latency: float = 0.0
    """Artificial delay awaited by signup and login, in seconds."""


@lru_cache(maxsize=1)
def get_settings() -> BranchliftSettings:
    """Return a cached settings instance.

    Call ``get_settings.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return BranchliftSettings()
