"""Service-account credential loader.

The file is read once; later `load()` calls return the cached credential.
"""

from __future__ import annotations

import json
from pathlib import Path

import aiofiles
from loguru import logger

from core.domain.models import CREDENTIAL_FIELDS, SERVICE_ACCOUNT_TYPE, Credential
from core.errors import CredentialInvalid, CredentialMalformed, CredentialMissing


class CredentialLoader:
    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._credential: Credential | None = None

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> Credential:
        if self._credential is not None:
            return self._credential

        if not self._path.is_file():
            raise CredentialMissing(str(self._path))

        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.warning(f"Cannot read service account {self._path}: {exc}")
            raise CredentialMalformed(str(self._path)) from exc
        if not isinstance(data, dict):
            raise CredentialMalformed(str(self._path))

        missing = [name for name in CREDENTIAL_FIELDS if not data.get(name)]
        if missing:
            raise CredentialInvalid(
                f"Google Service Account is invalid. Missing required fields: {', '.join(missing)}",
                missing,
            )
        if data["type"] != SERVICE_ACCOUNT_TYPE:
            raise CredentialInvalid('Google Service Account is invalid. Must be of type "service_account"')

        non_strings = [name for name in CREDENTIAL_FIELDS if not isinstance(data[name], str)]
        if non_strings:
            raise CredentialInvalid(
                f"Google Service Account is invalid. Fields must be strings: {', '.join(non_strings)}"
            )

        self._credential = Credential(
            project_id=data["project_id"],
            client_email=data["client_email"],
            private_key=data["private_key"],
            type=data["type"],
            raw=data,
        )
        logger.info(f"Loaded service account {self._credential.client_email} for project {self._credential.project_id}")
        return self._credential
