"""Launcher settings.

The launcher reads a small amount of process-wide configuration: where the
installation lives, which catalog file to load and how to log. Values come
from ``SCRIPTLAUNCH_*`` environment variables or a ``.env`` file.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    The settings object is only consulted to locate the catalog and to set
    up logging; the dispatcher itself never reads configuration.

Examples:
    >>> settings = LauncherSettings(home_dir="/opt/app")
    >>> str(settings.resolved_catalog_path())
    '/opt/app/config/launcher.yaml'

Tags:
    settings, configuration, pydantic, environment, scriptlaunch

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_NAME = "launcher.yaml"


class LauncherSettings(BaseSettings):
    """Process-wide launcher configuration.

    Fields
    ──────
    home_dir      : Installation directory; the catalog lives in ``config/``
    catalog_path  : Explicit catalog file, overrides the home_dir default
    program_name  : Program name shown in the usage header
    log_level     : Structlog log level
    log_format    : ``console`` or ``json``
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTLAUNCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    home_dir: Path = Field(
        default_factory=lambda: Path.home() / ".scriptlaunch",
        description="Installation directory",
    )
    catalog_path: Path | None = Field(default=None, description="Catalog file location")
    program_name: str = "scriptlaunch"

    # ── Observability ────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "console"] = "console"

    def resolved_catalog_path(self) -> Path:
        """Return the catalog path, defaulting to ``<home_dir>/config/launcher.yaml``."""
        if self.catalog_path is not None:
            return self.catalog_path
        return self.home_dir / "config" / DEFAULT_CATALOG_NAME


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, LauncherSettings] = {}


def get_settings(*, _force_reload: bool = False) -> LauncherSettings:
    """Load, validate, and cache the process-wide :class:`LauncherSettings`."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = LauncherSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
