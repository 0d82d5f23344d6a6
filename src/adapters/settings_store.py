"""Settings persistence (local JSON file).

Rules:
- `load` treats absent and corrupted files the same way (returns None), so
  the session falls back to first-run setup instead of crashing.
- `save` refuses settings whose language codes break the grammar.
- Last writer wins; there is a single user and a single process.
"""

from __future__ import annotations

import json
from pathlib import Path

import aiofiles
from loguru import logger
from pydantic import ValidationError

from core.domain.models import Settings
from core.errors import SettingsInvalid


class SettingsStore:
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        try:
            return self._path.is_file()
        except OSError:
            return False

    async def load(self) -> Settings | None:
        if not self.exists():
            return None

        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
            settings = Settings.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning(f"Ignoring unreadable settings file {self._path}: {exc}")
            return None

        errors = settings.language_errors()
        if errors:
            logger.warning(f"Ignoring settings file {self._path}: {'; '.join(errors)}")
            return None
        return settings

    async def save(self, settings: Settings) -> None:
        errors = settings.language_errors()
        if errors:
            raise SettingsInvalid(f"Invalid settings: {'; '.join(errors)}", {"errors": errors})

        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.to_json_dict(), ensure_ascii=False, indent=2)
        async with aiofiles.open(self._path, "w", encoding="utf-8") as f:
            await f.write(payload + "\n")
        logger.debug(f"Saved settings to {self._path}")
