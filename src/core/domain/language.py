"""Language-code grammar for gtai.

This module centralizes the language-code rules used across the
application. Keeping it in the domain layer lets the settings store, the
translator and the interactive prompts share a single source of truth
without importing adapters.
"""

from __future__ import annotations

import re
from typing import Any

LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")
LANGUAGE_CODE_HINT = "en, en-US, ru, es, pt-BR, etc."


def is_valid_language_code(code: Any) -> bool:
    """Return True for short (`en`) and regional (`en-US`) codes.

    Anything that is not a string, or that does not match the grammar
    once surrounding whitespace is stripped, is rejected.
    """

    if not isinstance(code, str) or not code:
        return False
    return LANGUAGE_CODE_PATTERN.match(code.strip()) is not None


def language_code_error(code: Any, *, role: str = "Language") -> str | None:
    """Validation message for prompts, or None when the code is valid."""

    if not isinstance(code, str) or not code.strip():
        return f"{role} cannot be empty"
    if not is_valid_language_code(code):
        return f"Please enter a valid language code ({LANGUAGE_CODE_HINT})"
    return None
