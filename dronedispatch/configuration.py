"""Mini README: Centralised configuration models and helpers for the dispatch controller.

Structure:
    * DispatchSettings - Pydantic model describing runtime configuration.
    * load_settings - build settings from an optional JSON config file.
    * get_settings - cached accessor for environment-aware settings.

Usage:
    Import ``get_settings`` inside the application factory. Values come from
    ``DRONEDISPATCH_*`` environment variables, an optional ``.env`` file and,
    when ``DRONEDISPATCH_CONFIG_FILE`` points at one, a JSON file such as
    ``config.dev.json``. Missing, empty or zero values fall back to the
    documented defaults (port 8080, ``http://localhost``, one minute).
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings

from .logging_utils import get_logger

LOGGER = get_logger(__name__)

DEFAULT_API_PORT = 8080
DEFAULT_LOCAL_URL = "http://localhost"
DEFAULT_LOG_PERIOD_MINUTES = 1


class DispatchSettings(BaseSettings):
    """Runtime configuration for the dispatch controller."""

    environment: str = Field(
        "development",
        description="Environment label controlling reload behaviour and logging levels.",
    )
    api_host: str = Field(
        "0.0.0.0",
        description="Network interface for the HTTP API to bind to.",
    )
    api_port: int = Field(
        DEFAULT_API_PORT,
        description="Port the HTTP API listens on.",
        ge=1,
        le=65535,
    )
    local_url: str = Field(
        DEFAULT_LOCAL_URL,
        description="Base URL advertised to operators when the server starts.",
    )
    log_period_minutes: int = Field(
        DEFAULT_LOG_PERIOD_MINUTES,
        description="Interval between battery level reports written to the log.",
        ge=1,
    )
    log_level: str = Field("INFO", description="Root logging level.")
    preload_demo_fleet: bool = Field(
        True,
        description="Register a handful of sample drones when the application starts.",
    )
    sample_image_path: Optional[Path] = Field(
        None,
        description=(
            "Picture of a medication case attached (base64 encoded) to the demo"
            " cargo. Leave unset to preload cargo without images."
        ),
    )
    config_file: Optional[Path] = Field(
        None,
        description="JSON file whose values override the environment.",
    )

    class Config:
        env_prefix = "DRONEDISPATCH_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @validator("api_port", pre=True)
    def _default_port(cls, value: Any) -> Any:
        """Treat an empty port as absent."""

        if value in (None, "", 0, "0"):
            return DEFAULT_API_PORT
        return value

    @validator("local_url", pre=True)
    def _default_local_url(cls, value: Any) -> Any:
        if value in (None, ""):
            return DEFAULT_LOCAL_URL
        return value

    @validator("log_period_minutes", pre=True)
    def _default_log_period(cls, value: Any) -> Any:
        if value in (None, "", 0, "0"):
            return DEFAULT_LOG_PERIOD_MINUTES
        return value

    @validator("sample_image_path", "config_file", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Optional[Path]:
        """Expand user directories in configured paths."""

        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @property
    def log_period_seconds(self) -> float:
        return float(self.log_period_minutes * 60)


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    """Return the JSON object stored in ``config_file``."""

    try:
        raw = config_file.read_text(encoding="utf-8")
    except OSError as error:
        raise ValueError(f"could not read config file {config_file}: {error}") from error
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as error:
        raise ValueError(f"failed to unmarshal config file {config_file}: {error}") from error
    if not isinstance(data, dict):
        raise ValueError(f"config file {config_file} must contain a JSON object")
    return data


def load_settings(config_file: Optional[str | Path] = None) -> DispatchSettings:
    """Build settings, layering the JSON config file over the environment."""

    if config_file is None:
        settings = DispatchSettings()
        if settings.config_file is None:
            return settings
        config_file = settings.config_file

    path = Path(config_file).expanduser()
    overrides = _read_config_file(path)
    overrides["config_file"] = path
    settings = DispatchSettings(**overrides)
    LOGGER.info(
        "Configuration loaded from %s: port=%s local_url=%s log_period_minutes=%s",
        path,
        settings.api_port,
        settings.local_url,
        settings.log_period_minutes,
    )
    return settings


@lru_cache()
def get_settings() -> DispatchSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return load_settings()
