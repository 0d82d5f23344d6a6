"""Contract for the interactive prompt collaborator.

Implemented by `cli.prompts.RichPrompter` and by the scripted fake used in
tests.

Rules:
- Input methods are asynchronous because they block on the user.
- A cancelled prompt (Ctrl+C / EOF) returns None instead of raising.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, Protocol, Sequence, runtime_checkable

Validator = Callable[[str], "str | None"]
MenuOption = tuple[str, str]


@runtime_checkable
class Prompter(Protocol):
    async def select(self, message: str, options: Sequence[MenuOption]) -> str | None:
        """Pick one option value; `options` is a sequence of (value, label)."""

        ...

    async def text(
        self,
        message: str,
        *,
        validate: Validator | None = None,
        placeholder: str | None = None,
    ) -> str | None:
        """Free text; re-asks until `validate` returns None."""

        ...

    async def confirm(self, message: str, *, default: bool = False) -> bool | None:
        ...

    def status(self, message: str) -> AbstractContextManager[object]:
        """Progress indicator wrapping a long-running step."""

        ...

    def note(self, title: str, body: str) -> None: ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...
