"""Interactive session state machine.

This module drives the whole interactive workflow: first-run setup, the
main menu, settings and glossary management, text and file translation.
Presentation is delegated to a `Prompter`, so the flow can be exercised
with a scripted fake and the Rich details stay in the CLI layer.

Menu graph:
- Main menu -> translate text | translate file | settings | exit
- Settings  -> change languages | toggle glossary case | glossaries | back
- Glossaries -> set active | upload | delete | back

Cancelling a prompt returns to the enclosing menu; cancelling the main menu
ends the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable

import aiofiles
from loguru import logger

from adapters.glossary_registry import GlossaryRegistry, glossary_content_type, is_valid_glossary_name
from adapters.settings_store import SettingsStore
from adapters.translator import Translator, output_path_for
from core.domain.language import LANGUAGE_CODE_HINT, language_code_error
from core.domain.models import GlossaryInfo, Settings, TranslationRequest
from core.errors import GtaiError, StorageError, UnsupportedFormat
from core.interfaces.prompter import MenuOption, Prompter

TEXT_FILE_SUFFIXES = (".txt", ".md")


class Menu(str, Enum):
    """Menu items; the value is what the prompter returns."""

    TRANSLATE = "translation"
    TRANSLATE_FILE = "file"
    SETTINGS = "settings"
    EXIT = "exit"

    CHANGE_LANGUAGES = "languages"
    TOGGLE_IGNORE_CASE = "ignore_case"
    GLOSSARIES = "glossary"

    SET_ACTIVE = "list"
    UPLOAD = "upload"
    DELETE = "delete"

    AGAIN = "restart"
    BACK = "back"

    def option(self, label: str) -> MenuOption:
        return (self.value, label)


MAIN_MENU = (
    Menu.TRANSLATE.option("🌐 Translate text"),
    Menu.TRANSLATE_FILE.option("📄 Translate file"),
    Menu.SETTINGS.option("🔧 Settings"),
    Menu.EXIT.option("🚪 Exit"),
)
SETTINGS_MENU = (
    Menu.CHANGE_LANGUAGES.option("🌐 Change languages"),
    Menu.TOGGLE_IGNORE_CASE.option("🔠 Toggle glossary case sensitivity"),
    Menu.GLOSSARIES.option("📖 Manage glossaries"),
    Menu.BACK.option("🏠 Back to main menu"),
)
GLOSSARY_MENU = (
    Menu.SET_ACTIVE.option("📗 Set active glossary"),
    Menu.UPLOAD.option("📙 Upload new glossary"),
    Menu.DELETE.option("📕 Delete glossary"),
    Menu.BACK.option("🏠 Back to main menu"),
)
NO_GLOSSARY = "none"


@dataclass(frozen=True)
class SessionLimits:
    max_text_chars: int = 20_000
    max_file_chars: int = 50_000


def _not_empty(label: str) -> Callable[[str], str | None]:
    def check(value: str) -> str | None:
        if not value or not value.strip():
            return f"{label} cannot be empty"
        return None

    return check


def _glossary_file_error(value: str) -> str | None:
    if not value or not value.strip():
        return "File path cannot be empty"
    try:
        glossary_content_type(value.strip())
    except UnsupportedFormat:
        return "Only CSV and TSV files are supported"
    return None


def _text_file_error(value: str) -> str | None:
    if not value or not value.strip():
        return "File path cannot be empty"
    if not value.strip().lower().endswith(TEXT_FILE_SUFFIXES):
        return "Only TXT and MD files are supported"
    return None


def _glossary_name_error(value: str) -> str | None:
    if not value or not value.strip():
        return "Glossary name cannot be empty"
    if not is_valid_glossary_name(value.strip()):
        return "Glossary name can only contain letters, numbers, hyphens, and underscores"
    return None


class SessionController:
    def __init__(
        self,
        prompter: Prompter,
        store: SettingsStore,
        registry: GlossaryRegistry,
        translator: Translator,
        *,
        limits: SessionLimits | None = None,
    ) -> None:
        self._prompter = prompter
        self._store = store
        self._registry = registry
        self._translator = translator
        self._limits = limits or SessionLimits()
        self.settings: Settings | None = None

    # -- lifecycle -----------------------------------------------------

    async def run(self) -> None:
        """Run until the user exits or cancels the main menu."""

        if not await self.bootstrap():
            self._prompter.warn("Setup cancelled.")
            return

        while True:
            choice = await self._prompter.select("- Main Menu -", MAIN_MENU)
            if choice is None or choice == Menu.EXIT:
                logger.info("Session ended by user")
                return
            if choice == Menu.TRANSLATE:
                await self._guarded(self.translate_text)
            elif choice == Menu.TRANSLATE_FILE:
                await self._guarded(self.translate_file)
            elif choice == Menu.SETTINGS:
                await self._guarded(self.settings_menu)

    async def bootstrap(self) -> bool:
        """Load settings or run first-run setup. False when setup is cancelled."""

        settings: Settings | None = None
        if not self._store.exists():
            self._prompter.info("First time setup")
        else:
            settings = await self._store.load()
            if settings is None:
                self._prompter.warn("Settings file is corrupted. Let's set it up again.")

        if settings is None:
            languages = await self._prompt_languages()
            if languages is None:
                return False
            settings = Settings(default_source_language=languages[0], default_target_language=languages[1])
            await self._store.save(settings)
            self._prompter.success("Settings saved successfully!")

        self.settings = settings
        return True

    async def _guarded(self, action: Callable[[], Awaitable[None]]) -> None:
        """Action boundary: report failures and return to the menu."""

        try:
            await action()
        except GtaiError as exc:
            logger.warning(f"{action.__name__} failed: {exc.error_code}: {exc.message}")
            self._prompter.error(f"Error: {exc.message}")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"{action.__name__} failed: {exc}")
            self._prompter.error(f"Error: {exc}")

    async def _apply(self, updated: Settings, message: str | None = None) -> bool:
        """Persist a settings transition; no-op when nothing changed."""

        if updated is self.settings:
            return False
        await self._store.save(updated)
        logger.debug(f"Settings updated: {updated.to_json_dict()}")
        self.settings = updated
        if message:
            self._prompter.info(message)
        return True

    # -- settings ------------------------------------------------------

    async def _prompt_languages(self) -> tuple[str, str] | None:
        self._prompter.info("Let's set up your default languages.")
        source = await self._prompter.text(
            "Enter your source language code",
            validate=lambda v: language_code_error(v, role="Source language"),
            placeholder=LANGUAGE_CODE_HINT,
        )
        if source is None:
            return None
        target = await self._prompter.text(
            "Enter your target language code",
            validate=lambda v: language_code_error(v, role="Target language"),
            placeholder=LANGUAGE_CODE_HINT,
        )
        if target is None:
            return None
        return source.strip(), target.strip()

    async def settings_menu(self) -> None:
        settings = self.settings
        self._prompter.note(
            "Current settings",
            f"Source language: {settings.default_source_language}\n"
            f"Target language: {settings.default_target_language}\n"
            f"Active glossary: {settings.active_glossary_label}\n"
            f"Glossary ignores case: {'yes' if settings.ignore_case else 'no'}",
        )
        choice = await self._prompter.select("- Settings Menu -", SETTINGS_MENU)
        if choice == Menu.CHANGE_LANGUAGES:
            await self.change_languages()
        elif choice == Menu.TOGGLE_IGNORE_CASE:
            flag = not self.settings.ignore_case
            await self._apply(self.settings.with_ignore_case(flag))
            self._prompter.success(f"Glossary matching is now case-{'insensitive' if flag else 'sensitive'}.")
        elif choice == Menu.GLOSSARIES:
            await self.glossary_menu()

    async def change_languages(self) -> None:
        languages = await self._prompt_languages()
        if languages is None:
            return
        had_glossary = self.settings.active_glossary is not None
        if await self._apply(self.settings.with_languages(*languages)):
            self._prompter.success("Settings saved successfully!")
            if had_glossary:
                self._prompter.info("Active glossary has been cleared. Select one matching the new languages.")

    # -- glossaries ----------------------------------------------------

    async def glossary_menu(self) -> None:
        choice = await self._prompter.select("Glossary management", GLOSSARY_MENU)
        if choice == Menu.SET_ACTIVE:
            await self.set_active_glossary()
        elif choice == Menu.UPLOAD:
            await self.upload_glossary()
        elif choice == Menu.DELETE:
            await self.delete_glossary()

    async def _list_glossaries(self) -> list[GlossaryInfo]:
        with self._prompter.status("Loading glossaries..."):
            glossaries = await self._registry.list()
        if glossaries:
            await self._apply(
                self.settings.on_glossaries_listed(g.name for g in glossaries),
                "Active glossary no longer exists and has been cleared.",
            )
        return glossaries

    async def set_active_glossary(self) -> None:
        glossaries = await self._list_glossaries()
        if not glossaries:
            self._prompter.warn("No glossaries found. Upload a glossary first.")
            await self._apply(self.settings.on_glossary_list_empty(), "Active glossary has been cleared.")
            return

        options = [(NO_GLOSSARY, "None (disable glossary)")]
        options.extend((g.name, g.label) for g in glossaries)
        selected = await self._prompter.select("Select active glossary", options)
        if selected is None:
            return

        name = None if selected == NO_GLOSSARY else selected
        await self._apply(self.settings.with_active_glossary(name))
        self._prompter.success(f"Active glossary {'disabled' if name is None else 'updated'}!")

    async def _choose_bucket(self) -> str | None:
        try:
            with self._prompter.status("Loading buckets..."):
                buckets = await self._registry.list_buckets()
        except StorageError as exc:
            self._prompter.error(f"Error loading buckets: {exc.message}")
            manual = await self._prompter.text(
                "Enter Google Storage bucket name manually",
                validate=_not_empty("Bucket name"),
            )
            return manual.strip() if manual is not None else None

        if not buckets:
            self._prompter.error("No buckets found in your Google Cloud project. Please create a bucket first.")
            return None
        return await self._prompter.select("Select Google Storage bucket", [(b, b) for b in buckets])

    async def upload_glossary(self) -> None:
        raw_path = await self._prompter.text(
            "Enter path to glossary file (CSV or TSV)",
            validate=_glossary_file_error,
        )
        if raw_path is None:
            return
        path = Path(raw_path.strip())
        if not path.is_file():
            self._prompter.error("File does not exist")
            return

        bucket = await self._choose_bucket()
        if bucket is None:
            return

        name = await self._prompter.text("Enter glossary name", validate=_glossary_name_error)
        if name is None:
            return
        name = name.strip()

        source = self.settings.default_source_language
        target = self.settings.default_target_language
        self._prompter.info(f"Using language pair from settings: {source} → {target}")

        with self._prompter.status("Uploading glossary..."):
            await self._registry.upload_and_create(path, bucket, name, source, target)
        self._prompter.success(f'Glossary "{name}" has been created and is ready to use.')

    async def delete_glossary(self) -> None:
        glossaries = await self._list_glossaries()
        if not glossaries:
            self._prompter.warn("No glossaries found to delete.")
            await self._apply(self.settings.on_glossary_list_empty(), "Active glossary has been cleared.")
            return

        selected = await self._prompter.select(
            "Select glossary to delete",
            [(g.name, g.label) for g in glossaries],
        )
        if selected is None:
            return

        confirmed = await self._prompter.confirm(
            "Are you sure you want to delete this glossary? This action cannot be undone.",
            default=False,
        )
        if not confirmed:
            return

        with self._prompter.status("Deleting glossary..."):
            await self._registry.delete(selected)
        self._prompter.success("Glossary has been deleted.")
        await self._apply(
            self.settings.on_glossary_deleted(selected),
            "Active glossary has been cleared since it was deleted.",
        )

    # -- translation ---------------------------------------------------

    def _progress_label(self) -> str:
        settings = self.settings
        suffix = " (using glossary)" if settings.active_glossary else ""
        return (
            f"Translating from {settings.default_source_language} to "
            f"{settings.default_target_language}{suffix}..."
        )

    def _text_error(self, value: str) -> str | None:
        if not value or not value.strip():
            return "Text cannot be empty"
        if len(value.strip()) > self._limits.max_text_chars:
            return f"Text is too long (max {self._limits.max_text_chars} characters)"
        return None

    async def translate_text(self) -> None:
        while True:
            text = await self._prompter.text("Enter the text to translate", validate=self._text_error)
            if text is None:
                return

            request = TranslationRequest.from_settings(text.strip(), self.settings)
            with self._prompter.status(self._progress_label()):
                result = await self._translator.translate_request(request)
            self._prompter.success(result)

            next_step = await self._prompter.select(
                "What would you like to do next?",
                (Menu.AGAIN.option("🔄 Translate another text"), Menu.BACK.option("🏠 Back to main menu")),
            )
            if next_step != Menu.AGAIN:
                return

    async def translate_file(self) -> None:
        while True:
            raw_path = await self._prompter.text("Enter path to file (TXT or MD)", validate=_text_file_error)
            if raw_path is None:
                return
            path = Path(raw_path.strip())
            if not path.is_file():
                self._prompter.error("File does not exist")
                return

            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
            if not content.strip():
                self._prompter.error("File is empty")
                return
            if len(content) > self._limits.max_file_chars:
                self._prompter.error(f"File is too large (max {self._limits.max_file_chars:,} characters)")
                return

            request = TranslationRequest.from_settings(content, self.settings)
            with self._prompter.status(self._progress_label()):
                result = await self._translator.translate_request(request)

            output_path = output_path_for(path, self.settings.default_target_language)
            async with aiofiles.open(output_path, "w", encoding="utf-8") as f:
                await f.write(result)
            logger.info(f"Wrote translation of {path} to {output_path}")
            self._prompter.success(f"File translated and saved as: {output_path}")

            next_step = await self._prompter.select(
                "What would you like to do next?",
                (Menu.AGAIN.option("📄 Translate another file"), Menu.BACK.option("🏠 Back to main menu")),
            )
            if next_step != Menu.AGAIN:
                return
