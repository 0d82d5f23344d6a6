"""Domain models (Pydantic v2).

- Models are frozen; `Settings` changes through named transitions that
  return a new instance, or the same one when nothing changes.
- Strict fields reject wrongly typed JSON (e.g. a numeric glossary name).

Note:
- These models describe *what* the information is, not *how* it is read
  or persisted.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import BaseModel, Field, StrictBool, StrictStr, model_validator
from pydantic.config import ConfigDict

from core.domain.language import LANGUAGE_CODE_PATTERN

SERVICE_ACCOUNT_TYPE = "service_account"
CREDENTIAL_FIELDS = ("project_id", "client_email", "private_key", "type")


class Credential(BaseModel):
    """Google service-account credential loaded at startup.

    The raw mapping is kept because the Google auth library needs fields
    beyond the four we validate (token_uri, private_key_id, ...).
    """

    model_config = ConfigDict(frozen=True)

    project_id: str = Field(..., min_length=1)
    client_email: str = Field(..., min_length=1)
    private_key: str = Field(..., min_length=1, repr=False)
    type: str = Field(default=SERVICE_ACCOUNT_TYPE)
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    def parent_for(self, location: str) -> str:
        return f"projects/{self.project_id}/locations/{location}"


class Settings(BaseModel):
    """User preferences persisted in the local settings file.

    Transitions:
    - `with_languages`, `with_active_glossary`, `with_ignore_case` for
      explicit user actions.
    - `on_glossary_list_empty`, `on_glossary_deleted` and
      `on_glossaries_listed` repair the active-glossary reference when
      remote state no longer backs it.

    Every transition returns `self` when nothing changes, so callers can
    skip the write with an identity check.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    default_source_language: StrictStr = Field(
        ...,
        alias="defaultSourceLanguage",
        description="Language code used as translation source.",
    )
    default_target_language: StrictStr = Field(
        ...,
        alias="defaultTargetLanguage",
        description="Language code used as translation target.",
    )
    active_glossary: StrictStr | None = Field(
        default=None,
        alias="activeGlossary",
        description="Full glossary resource name, opaque to the client.",
    )
    glossary_ignore_case: StrictBool | None = Field(
        default=None,
        alias="glossaryIgnoreCase",
        description="Glossary case-insensitivity; True when unset.",
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_null_optionals(cls, data: Any) -> Any:
        """Optional keys are either omitted or typed; an explicit null is corrupt."""

        if isinstance(data, dict):
            for key in ("activeGlossary", "active_glossary", "glossaryIgnoreCase", "glossary_ignore_case"):
                if key in data and data[key] is None:
                    raise ValueError(f"{key} must be omitted rather than null")
        return data

    def language_errors(self) -> list[str]:
        errors: list[str] = []
        if not LANGUAGE_CODE_PATTERN.fullmatch(self.default_source_language):
            errors.append(f"invalid source language code: {self.default_source_language!r}")
        if not LANGUAGE_CODE_PATTERN.fullmatch(self.default_target_language):
            errors.append(f"invalid target language code: {self.default_target_language!r}")
        return errors

    @property
    def ignore_case(self) -> bool:
        return True if self.glossary_ignore_case is None else self.glossary_ignore_case

    @property
    def active_glossary_label(self) -> str:
        if not self.active_glossary:
            return "None"
        return self.active_glossary.rstrip("/").split("/")[-1]

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def with_languages(self, source: str, target: str) -> Settings:
        """New language pair. Clears the active glossary, which belongs to the old pair."""

        if source == self.default_source_language and target == self.default_target_language:
            return self
        return self.model_copy(
            update={
                "default_source_language": source,
                "default_target_language": target,
                "active_glossary": None,
            }
        )

    def with_active_glossary(self, name: str | None) -> Settings:
        name = name or None
        if name == self.active_glossary:
            return self
        return self.model_copy(update={"active_glossary": name})

    def with_ignore_case(self, flag: bool) -> Settings:
        if self.glossary_ignore_case is flag:
            return self
        return self.model_copy(update={"glossary_ignore_case": flag})

    def on_glossary_list_empty(self) -> Settings:
        """No glossary exists remotely: any active reference is stale."""

        return self.with_active_glossary(None)

    def on_glossary_deleted(self, name: str) -> Settings:
        """Clear the active reference only when it names the deleted glossary."""

        if self.active_glossary != name:
            return self
        return self.with_active_glossary(None)

    def on_glossaries_listed(self, names: Iterable[str]) -> Settings:
        """Drop a reference to a glossary deleted out of band."""

        if not self.active_glossary or self.active_glossary in set(names):
            return self
        return self.with_active_glossary(None)


class GlossaryInfo(BaseModel):
    """Read-only projection of a glossary registered on the translation service."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Full resource name.")
    display_name: str = Field(default="")
    source_language_code: str = Field(default="")
    target_language_code: str = Field(default="")
    entry_count: int = Field(default=0, ge=0)

    @property
    def short_name(self) -> str:
        return self.name.rstrip("/").split("/")[-1] if self.name else ""

    @property
    def label(self) -> str:
        return (
            f"{self.display_name} ({self.source_language_code} → "
            f"{self.target_language_code}, {self.entry_count} entries)"
        )


class TranslationRequest(BaseModel):
    """Transient request assembled from settings plus the optional glossary."""

    model_config = ConfigDict(frozen=True)

    text: str
    source_language: str
    target_language: str
    glossary: str | None = None
    ignore_case: bool = True

    @classmethod
    def from_settings(cls, text: str, settings: Settings) -> TranslationRequest:
        return cls(
            text=text,
            source_language=settings.default_source_language,
            target_language=settings.default_target_language,
            glossary=settings.active_glossary,
            ignore_case=settings.ignore_case,
        )
