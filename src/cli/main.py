"""gtai command line entry point.

`gtai` without a subcommand starts the interactive session. Exit codes:
- 0: normal exit or user cancel
- 1: missing/invalid service account, or an unexpected error
"""

from __future__ import annotations

import asyncio

import typer
from loguru import logger
from rich.console import Console

from adapters.credentials import CredentialLoader
from adapters.glossary_registry import GlossaryRegistry
from adapters.google_clients import build_storage_client, build_translation_client
from adapters.settings_store import SettingsStore
from adapters.translator import Translator
from cli.doctor import app as doctor_app
from cli.prompts import RichPrompter
from cli.ui_components import print_banner
from core.config import AppSettings
from core.errors import CredentialError
from core.log import configure_logging
from core.services.session import SessionController, SessionLimits

app = typer.Typer(
    invoke_without_command=True,
    add_completion=False,
    pretty_exceptions_enable=False,
    help="Translate text and files with Google Cloud Translation and custom glossaries.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()


async def run_session(settings: AppSettings, console: Console) -> int:
    loader = CredentialLoader(settings.service_account_path)
    try:
        credential = await loader.load()
    except CredentialError as exc:
        logger.error(f"Cannot start: {exc.error_code}: {exc.message}")
        console.print(f"[red]{exc.message}[/red]")
        console.print("Please ensure service-account.json is present and valid.")
        return 1

    translation_client = build_translation_client(credential)
    registry = GlossaryRegistry(
        credential,
        build_storage_client(credential),
        translation_client,
        location=settings.location,
    )
    translator = Translator(credential, translation_client, location=settings.location)
    controller = SessionController(
        RichPrompter(console),
        SettingsStore(settings.settings_path),
        registry,
        translator,
        limits=SessionLimits(max_text_chars=settings.max_text_chars, max_file_chars=settings.max_file_chars),
    )

    print_banner(console)
    await controller.run()
    console.print("Goodbye!")
    return 0


@app.callback()
def main(ctx: typer.Context) -> None:
    """Start the interactive session (default) or run a subcommand."""

    try:
        settings = AppSettings()
        configure_logging(settings)
        if ctx.invoked_subcommand is not None:
            return
        code = asyncio.run(run_session(settings, _console))
    except KeyboardInterrupt:
        _console.print("\nOperation cancelled.")
        code = 0
    except Exception:
        logger.exception("Unexpected error")
        _console.print("[red]Unexpected error occurred[/red]")
        _console.print_exception(show_locals=False)
        code = 1
    raise typer.Exit(code)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
