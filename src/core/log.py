"""Logging setup (loguru).

The terminal belongs to the interactive menus, so the default stderr sink
is replaced by a rotating file sink.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from core.config import AppSettings


def configure_logging(settings: AppSettings | None = None) -> Path:
    settings = settings or AppSettings()
    log_path = settings.resolved_log_file()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        log_path,
        level=settings.log_level.upper(),
        rotation="1 MB",
        retention=3,
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
    )
    logger.debug(f"Logging to {log_path}")
    return log_path
