"""Centralized configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

Page geometry lives here so that pagination bounds can be overridden per
deployment without touching the engine (`PITCHPDF_PAGE_WIDTH`,
`PITCHPDF_PAGE_HEIGHT`). The defaults are A4 at 96 DPI.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

A4_WIDTH = 794
A4_HEIGHT = 1123


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    page_width : int
        Default page width in logical pixels; maps from `PITCHPDF_PAGE_WIDTH`.
    page_height : int
        Default page height in logical pixels; maps from `PITCHPDF_PAGE_HEIGHT`.
    brand_name : str
        Brand shown in the header strip and footer mark; maps from `PITCHPDF_BRAND`.
    trace_dir : str | None
        Directory for JSON stage traces; maps from `PITCHPDF_TRACE_DIR`.
    """

    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    page_width: int = Field(default=A4_WIDTH, gt=0, alias="PITCHPDF_PAGE_WIDTH")
    page_height: int = Field(default=A4_HEIGHT, gt=0, alias="PITCHPDF_PAGE_HEIGHT")
    brand_name: str = Field(default="pitchPDF", alias="PITCHPDF_BRAND")
    trace_dir: str | None = Field(default=None, alias="PITCHPDF_TRACE_DIR")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Tests can force a rebuild via `load_settings.cache_clear()` after
    mutating the environment.
    """
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "pitchpdf") -> logging.Logger:
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


__all__ = [
    "A4_HEIGHT",
    "A4_WIDTH",
    "Settings",
    "get_logger",
    "load_settings",
    "settings",
]
