"""Translation requests against Google Cloud Translation v3.

Input checks run before any remote call. Responses prefer the
glossary-specific translation and fall back to the plain one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger

from core.domain.models import Credential, TranslationRequest
from core.errors import (
    EmptyTextError,
    EmptyTranslationError,
    LanguageNotSpecified,
    SameLanguageError,
    map_provider_error,
)

DEFAULT_LOCATION = "us-central1"
MIME_TYPE = "text/plain"


def output_path_for(path: Path | str, target_language: str) -> Path:
    """`notes.md` translated to `ru` is written next to it as `notes-ru.md`."""

    path = Path(path)
    return path.with_name(f"{path.stem}-{target_language}{path.suffix}")


def _first_text(translations: Any) -> str:
    if not translations:
        return ""
    return getattr(translations[0], "translated_text", "") or ""


class Translator:
    def __init__(self, credential: Credential, translation_client: Any, *, location: str = DEFAULT_LOCATION) -> None:
        self._client = translation_client
        self._parent = credential.parent_for(location)

    def build_request(self, request: TranslationRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "parent": self._parent,
            "contents": [request.text.strip()],
            "mime_type": MIME_TYPE,
            "source_language_code": request.source_language,
            "target_language_code": request.target_language,
        }
        if request.glossary:
            payload["glossary_config"] = {
                "glossary": request.glossary,
                "ignore_case": request.ignore_case,
            }
        return payload

    async def translate(
        self,
        text: str,
        source_language: str,
        target_language: str,
        glossary: str | None = None,
        ignore_case: bool = True,
    ) -> str:
        return await self.translate_request(
            TranslationRequest(
                text=text,
                source_language=source_language,
                target_language=target_language,
                glossary=glossary,
                ignore_case=ignore_case,
            )
        )

    async def translate_request(self, request: TranslationRequest) -> str:
        if not request.source_language or not request.target_language:
            raise LanguageNotSpecified()
        if request.source_language == request.target_language:
            raise SameLanguageError(request.source_language)
        if not request.text or not request.text.strip():
            raise EmptyTextError()

        payload = self.build_request(request)
        logger.info(
            f"Translating {len(payload['contents'][0])} chars "
            f"{request.source_language} -> {request.target_language}"
            f"{' with glossary ' + request.glossary if request.glossary else ''}"
        )
        try:
            response = await self._client.translate_text(request=payload)
        except Exception as exc:
            mapped = map_provider_error(exc)
            logger.warning(f"Translation failed: {mapped.message}")
            raise mapped from exc

        text = _first_text(getattr(response, "glossary_translations", None))
        if not text:
            text = _first_text(getattr(response, "translations", None))
        if not text:
            raise EmptyTranslationError()
        return text
