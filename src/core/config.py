"""Core configuration.

Environment variables (prefix `GTAI_`) and `.env` files are read here with
pydantic-settings; the CLI, adapters and logging all take an `AppSettings`.

Not to be confused with the user's translation preferences: those live in the
settings file handled by `adapters.settings_store`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "gtai"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application configuration.

    Values come from init kwargs, then `GTAI_*` env vars, then `.env` files.
    """

    model_config = SettingsConfigDict(
        env_prefix="GTAI_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    settings_path: Path = Field(
        default=Path(".gtai.json"),
        description="JSON file holding languages and the active glossary.",
    )
    service_account_path: Path = Field(
        default=Path("service-account.json"),
        description="Google service-account key file.",
    )
    location: str = Field(
        default="us-central1",
        min_length=1,
        description="Translation API location hosting glossaries.",
    )

    max_text_chars: int = Field(
        default=20_000,
        gt=0,
        description="Maximum length of ad-hoc text accepted by the prompt.",
    )
    max_file_chars: int = Field(
        default=50_000,
        gt=0,
        description="Maximum length of a file accepted for translation.",
    )

    log_level: str = Field(
        default="INFO",
        description="loguru level for the file sink.",
    )
    log_file: Path | None = Field(
        default=None,
        description="Log file path (defaults to <user config dir>/gtai.log).",
    )

    def resolved_log_file(self) -> Path:
        return self.log_file or get_user_config_dir() / f"{APP_NAME}.log"
