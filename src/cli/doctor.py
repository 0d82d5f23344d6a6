"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from adapters.credentials import CredentialLoader
from adapters.glossary_registry import GlossaryRegistry
from adapters.google_clients import build_storage_client, build_translation_client
from adapters.settings_store import SettingsStore
from cli.ui_components import build_checks_table
from core.config import AppSettings
from core.errors import GtaiError

app = typer.Typer(no_args_is_help=False, help="Environment diagnostics and configuration checks.")

_console = Console()


async def collect_checks(settings: AppSettings) -> list[tuple[str, str, str]]:
    """Run the checks; each row is (check, status, details)."""

    rows: list[tuple[str, str, str]] = []

    store = SettingsStore(settings.settings_path)
    if not store.exists():
        rows.append(("Settings file", "MISSING", f"{store.path} -> first run setup will ask for languages"))
    else:
        loaded = await store.load()
        if loaded is None:
            rows.append(("Settings file", "CORRUPTED", f"{store.path} -> setup will run again"))
        else:
            rows.append(
                (
                    "Settings file",
                    "OK",
                    f"{loaded.default_source_language} → {loaded.default_target_language}, "
                    f"glossary: {loaded.active_glossary_label}",
                )
            )

    try:
        credential = await CredentialLoader(settings.service_account_path).load()
    except GtaiError as exc:
        rows.append(("Service account", "FAIL", exc.message))
        return rows
    rows.append(("Service account", "OK", f"{credential.client_email} ({credential.project_id})"))

    registry = GlossaryRegistry(
        credential,
        build_storage_client(credential),
        build_translation_client(credential),
        location=settings.location,
    )
    try:
        buckets = await registry.list_buckets()
        rows.append(("Cloud Storage", "OK", f"{len(buckets)} bucket(s)"))
    except GtaiError as exc:
        rows.append(("Cloud Storage", "FAIL", exc.message))
    try:
        glossaries = await registry.list()
        rows.append(("Translation API", "OK", f"{len(glossaries)} glossary(ies) in {registry.parent}"))
    except GtaiError as exc:
        rows.append(("Translation API", "FAIL", exc.message))
    return rows


@app.callback(invoke_without_command=True)
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    table = build_checks_table("gtai Doctor")
    rows = asyncio.run(collect_checks(settings))
    for row in rows:
        table.add_row(*row)
    _console.print(table)

    if any(status == "FAIL" for _, status, _ in rows):
        raise typer.Exit(1)
