"""Centralized configuration using Pydantic Settings (v2).

`load_settings()` builds (and caches) a `Settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

Only *defaults* live here. A :class:`~statehistory.core.history.manager.HistoryManager`
never reads settings after construction, so two managers built under different
environments keep their own capacity.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `STATEHISTORY_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    history_capacity : int | None
        Default undo-stack bound for managers created without an explicit
        capacity. Unset means unbounded. Maps from `STATEHISTORY_CAPACITY`.
    label_token_length : int
        Number of hex characters in the random token of default snapshot
        labels. Maps from `STATEHISTORY_LABEL_TOKEN_LENGTH`.
    """

    environment: EnvName = Field(default="dev", alias="STATEHISTORY_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    history_capacity: int | None = Field(default=None, ge=1, alias="STATEHISTORY_CAPACITY")
    label_token_length: int = Field(
        default=6, ge=1, le=32, alias="STATEHISTORY_LABEL_TOKEN_LENGTH"
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Kept behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("STATEHISTORY_ENV", "dev")
    return Settings()


def get_logger(name: str = "statehistory") -> logging.Logger:
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


__all__ = ["Settings", "load_settings", "get_logger", "EnvName", "LogLevelName"]
