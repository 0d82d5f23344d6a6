"""Rich implementation of `core.interfaces.prompter.Prompter`.

Prompts block on the terminal inside the coroutine: there is a single
logical thread and nothing else to schedule while the user types. Ctrl+C
or EOF at a prompt is reported as a cancel (None).
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.text import Text

from cli.ui_components import build_menu_table, build_note_panel
from core.interfaces.prompter import MenuOption, Validator


class RichPrompter:
    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def _cancelled(self) -> None:
        self._console.print()
        self._console.print(Text("Cancelled.", style="dim"))

    async def select(self, message: str, options: Sequence[MenuOption]) -> str | None:
        options = list(options)
        self._console.print()
        self._console.print(build_menu_table(message, options))
        choices = [str(i) for i in range(1, len(options) + 1)]
        try:
            answer = Prompt.ask("Choose", choices=choices, show_choices=False, console=self._console)
        except (KeyboardInterrupt, EOFError):
            self._cancelled()
            return None
        return options[int(answer) - 1][0]

    async def text(
        self,
        message: str,
        *,
        validate: Validator | None = None,
        placeholder: str | None = None,
    ) -> str | None:
        prompt = f"{message} [dim]({placeholder})[/dim]" if placeholder else message
        while True:
            try:
                value = Prompt.ask(prompt, console=self._console)
            except (KeyboardInterrupt, EOFError):
                self._cancelled()
                return None
            problem = validate(value) if validate else None
            if problem is None:
                return value
            self._console.print(Text(problem, style="red"))

    async def confirm(self, message: str, *, default: bool = False) -> bool | None:
        try:
            return Confirm.ask(message, default=default, console=self._console)
        except (KeyboardInterrupt, EOFError):
            self._cancelled()
            return None

    def status(self, message: str) -> AbstractContextManager[object]:
        return self._console.status(message, spinner="dots")

    def note(self, title: str, body: str) -> None:
        self._console.print(build_note_panel(title, body))

    def info(self, message: str) -> None:
        self._console.print(Text.assemble(("ℹ ", "cyan"), message))

    def success(self, message: str) -> None:
        self._console.print(Text.assemble(("✔ ", "green"), message))

    def warn(self, message: str) -> None:
        self._console.print(Text.assemble(("▲ ", "yellow"), message))

    def error(self, message: str) -> None:
        self._console.print(Text.assemble(("✖ ", "red"), message))
