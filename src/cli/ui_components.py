"""UI components for the CLI (Rich).

Tables and panels shared by the prompter and the doctor command.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def print_banner(console: Console) -> None:
    """Print the welcome banner."""

    title = Text("🌐 gtai", style="bold cyan")
    subtitle = Text("Google Cloud Translation • Custom glossaries", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_menu_table(title: str, options: Sequence[tuple[str, str]]) -> Table:
    """Numbered menu; the user answers with the row number."""

    table = Table(title=title, show_header=False, title_style="bold cyan", box=None, pad_edge=False)
    table.add_column("#", style="bright_green", no_wrap=True, justify="right")
    table.add_column("Option", style="white")
    for index, (_, label) in enumerate(options, start=1):
        table.add_row(str(index), Text(label))
    return table


def build_note_panel(title: str, body: str) -> Panel:
    return Panel(Text(body), title=Text(title, style="bold yellow"), border_style="yellow")


def build_checks_table(title: str) -> Table:
    table = Table(title=title)
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
