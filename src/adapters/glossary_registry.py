"""Glossary registry on Google Cloud (Storage + Translation v3).

Lifecycle of a glossary:
1. The CSV/TSV source file is uploaded to a bucket under `glossaries/`.
2. A glossary resource is registered from that `gs://` URI. Registration is
   a long-running operation; the glossary is unusable until it completes,
   so `register` waits for it.
3. Glossaries are listed/deleted under the location-scoped parent.

`upload_and_create` is not transactional: when registration fails the
uploaded object stays in the bucket.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from google.cloud import translate_v3
from loguru import logger

from core.domain.models import Credential, GlossaryInfo
from core.errors import (
    DeletionError,
    FileNotFound,
    ProviderError,
    RegistrationError,
    StorageError,
    UnsupportedFormat,
    describe_remote_error,
)

GLOSSARY_PREFIX = "glossaries"
DEFAULT_LOCATION = "us-central1"
CONTENT_TYPES = {
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
}
GLOSSARY_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")


def is_valid_glossary_name(name: str) -> bool:
    return bool(name) and GLOSSARY_NAME_PATTERN.fullmatch(name) is not None


def glossary_content_type(path: Path | str) -> str:
    """Content type for a glossary source file; raises for other extensions."""

    ext = Path(path).suffix.lower()
    content_type = CONTENT_TYPES.get(ext)
    if content_type is None:
        raise UnsupportedFormat("Only CSV and TSV files are supported for glossaries", str(path))
    return content_type


def _nested(obj: Any, *names: str) -> Any:
    for name in names:
        if obj is None:
            return None
        obj = getattr(obj, name, None)
    return obj


def to_glossary_info(glossary: Any) -> GlossaryInfo:
    """Project an SDK glossary onto `GlossaryInfo`, defaulting missing fields."""

    name = _nested(glossary, "name") or ""
    display_name = _nested(glossary, "display_name") or Path(name).name
    entry_count = _nested(glossary, "entry_count") or 0
    return GlossaryInfo(
        name=name,
        display_name=display_name,
        source_language_code=_nested(glossary, "language_pair", "source_language_code") or "",
        target_language_code=_nested(glossary, "language_pair", "target_language_code") or "",
        entry_count=int(entry_count),
    )


class GlossaryRegistry:
    def __init__(
        self,
        credential: Credential,
        storage_client: Any,
        translation_client: Any,
        *,
        location: str = DEFAULT_LOCATION,
    ) -> None:
        self._credential = credential
        self._storage = storage_client
        self._translation = translation_client
        self._parent = credential.parent_for(location)

    @property
    def parent(self) -> str:
        return self._parent

    def glossary_path(self, name: str) -> str:
        return f"{self._parent}/glossaries/{name}"

    async def list_buckets(self) -> list[str]:
        def _list() -> list[str]:
            return [bucket.name for bucket in self._storage.list_buckets()]

        try:
            buckets = await asyncio.to_thread(_list)
        except Exception as exc:
            raise StorageError(f"Failed to list buckets: {describe_remote_error(exc)}") from exc
        logger.info(f"Found {len(buckets)} bucket(s) in project {self._credential.project_id}")
        return buckets

    async def upload_file(self, local_path: Path | str, bucket: str) -> str:
        path = Path(local_path)
        if not path.is_file():
            raise FileNotFound(str(path))
        content_type = glossary_content_type(path)

        object_name = f"{GLOSSARY_PREFIX}/{path.name}"
        try:
            blob = self._storage.bucket(bucket).blob(object_name)
            await asyncio.to_thread(blob.upload_from_filename, str(path), content_type=content_type)
        except Exception as exc:
            raise StorageError(
                f"Failed to upload file to Google Storage: {describe_remote_error(exc)}",
                {"bucket": bucket, "object": object_name},
            ) from exc

        uri = f"gs://{bucket}/{object_name}"
        logger.info(f"Uploaded {path} to {uri} ({content_type})")
        return uri

    async def register(self, name: str, source_language: str, target_language: str, input_uri: str) -> str:
        glossary_path = self.glossary_path(name)
        glossary = translate_v3.Glossary(
            name=glossary_path,
            language_pair=translate_v3.Glossary.LanguageCodePair(
                source_language_code=source_language,
                target_language_code=target_language,
            ),
            input_config=translate_v3.GlossaryInputConfig(
                gcs_source=translate_v3.GcsSource(input_uri=input_uri),
            ),
        )

        logger.info(f"Creating glossary {glossary_path} from {input_uri}")
        try:
            operation = await self._translation.create_glossary(parent=self._parent, glossary=glossary)
            await operation.result()
        except Exception as exc:
            raise RegistrationError(
                f"Failed to create glossary: {describe_remote_error(exc)}",
                {"glossary": glossary_path, "input_uri": input_uri},
            ) from exc

        logger.info(f"Glossary {glossary_path} is ready")
        return glossary_path

    async def list(self) -> list[GlossaryInfo]:
        try:
            pager = await self._translation.list_glossaries(parent=self._parent)
            glossaries = [to_glossary_info(glossary) async for glossary in pager]
        except Exception as exc:
            raise ProviderError(f"Failed to list glossaries: {describe_remote_error(exc)}") from exc
        logger.debug(f"Listed {len(glossaries)} glossary(ies) under {self._parent}")
        return glossaries

    async def delete(self, name: str) -> None:
        logger.info(f"Deleting glossary {name}")
        try:
            operation = await self._translation.delete_glossary(name=name)
            await operation.result()
        except Exception as exc:
            raise DeletionError(
                f"Failed to delete glossary: {describe_remote_error(exc)}",
                {"glossary": name},
            ) from exc

    async def upload_and_create(
        self,
        local_path: Path | str,
        bucket: str,
        name: str,
        source_language: str,
        target_language: str,
    ) -> str:
        input_uri = await self.upload_file(local_path, bucket)
        try:
            return await self.register(name, source_language, target_language, input_uri)
        except RegistrationError:
            logger.warning(f"Registration of {name} failed; {input_uri} is left in the bucket")
            raise
