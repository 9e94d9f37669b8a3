from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from .config import CONFIG_FILE, AppConfig, load_config

ENV_PREFIX = "ESC_"


@dataclass(frozen=True, slots=True)
class Settings:
    """Overrides sourced from ``ESC_*`` environment variables."""

    config_path: Path = CONFIG_FILE
    enable_local_api: bool | None = None
    output_dir: Path | None = None
    templates_dir: Path | None = None


def _parse_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return None


def _env_path(name: str) -> Path | None:
    value = os.getenv(f"{ENV_PREFIX}{name}")
    return Path(value) if value else None


def _read_settings() -> Settings:
    return Settings(
        config_path=_env_path("CONFIG_PATH") or CONFIG_FILE,
        enable_local_api=_parse_bool(os.getenv(f"{ENV_PREFIX}ENABLE_LOCAL_API")),
        output_dir=_env_path("OUTPUT_DIR"),
        templates_dir=_env_path("TEMPLATES_DIR"),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return _read_settings()


def apply_settings(config: AppConfig, settings: Settings) -> AppConfig:
    if settings.enable_local_api is not None:
        config.api.enable_local_api = settings.enable_local_api
    if settings.output_dir is not None:
        config.runtime.output_dir = settings.output_dir
    if settings.templates_dir is not None:
        config.templates.directory = settings.templates_dir
    return config


def load_effective_config(path: Path | None = None, settings: Settings | None = None) -> AppConfig:
    """Load ``config.toml`` (explicit *path* first, then ``ESC_CONFIG_PATH``) with env overrides."""

    settings = settings or get_settings()
    return apply_settings(load_config(path or settings.config_path), settings)


__all__ = [
    "ENV_PREFIX",
    "Settings",
    "apply_settings",
    "get_settings",
    "load_effective_config",
]
