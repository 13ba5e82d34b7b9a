"""Centralized probe configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed probe configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime flag for this process; maps from `BRAGI_PROBE_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    environments_file : Path
        JSON list of `{"env": ..., "url": ...}` entries describing the probed
        environments; maps from `BRAGI_PROBE_ENVIRONMENTS_FILE`.
    probe_timeout_seconds : float
        Timeout applied to every individual network call (frontend status,
        backend info, backend index listing).
    probe_deadline_seconds : float
        Overall deadline for one coordinator run across all environments.
    default_index_prefix : str
        Index prefix assumed when the frontend's backend URL has no path.
    host, port :
        Bind address for the HTTP query surface.
    """

    environment: EnvName = Field(default="dev", alias="BRAGI_PROBE_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    environments_file: Path = Field(
        default=Path("env.json"), alias="BRAGI_PROBE_ENVIRONMENTS_FILE"
    )
    probe_timeout_seconds: float = Field(default=5.0, gt=0, alias="BRAGI_PROBE_TIMEOUT")
    probe_deadline_seconds: float = Field(default=20.0, gt=0, alias="BRAGI_PROBE_DEADLINE")
    default_index_prefix: str = Field(
        default="munin", min_length=1, alias="BRAGI_PROBE_INDEX_PREFIX"
    )
    host: str = Field(default="0.0.0.0", alias="BRAGI_PROBE_HOST")
    port: int = Field(default=8080, ge=1, le=65535, alias="BRAGI_PROBE_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("BRAGI_PROBE_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "bragi_probe") -> logging.Logger:
    """Return a process-global logger configured to the current log level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
