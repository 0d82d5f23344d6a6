"""Error taxonomy for gtai.

Contents:
- The `GtaiError` hierarchy raised by every adapter and caught by the
  session at each action boundary.
- `describe_remote_error`, which turns SDK exceptions, gRPC status payloads
  and plain dicts into a single line of text.
- `map_provider_error`, which rewrites known Translation API failures.
"""

from __future__ import annotations

import json
from typing import Any

from google.api_core import exceptions as google_exceptions


class GtaiError(Exception):
    """Base exception for gtai errors."""

    def __init__(self, message: str, error_code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "GTAI_ERROR"
        self.details = details or {}


class CredentialError(GtaiError):
    """Base for service-account loading failures (fatal at startup)."""


class CredentialMissing(CredentialError):
    def __init__(self, path: str):
        super().__init__(
            "Google Service Account not found. Please add a valid service-account.json to this directory.",
            "CREDENTIAL_MISSING",
            {"path": path},
        )


class CredentialMalformed(CredentialError):
    def __init__(self, path: str):
        super().__init__(
            "Google Service Account file is not valid JSON. Please check the file format.",
            "CREDENTIAL_MALFORMED",
            {"path": path},
        )


class CredentialInvalid(CredentialError):
    def __init__(self, message: str, missing_fields: list[str] | None = None):
        super().__init__(message, "CREDENTIAL_INVALID", {"missing_fields": missing_fields or []})
        self.missing_fields = missing_fields or []


class SettingsInvalid(GtaiError):
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "SETTINGS_INVALID", details)


class FileNotFound(GtaiError):
    def __init__(self, path: str):
        super().__init__(f"File not found: {path}", "FILE_NOT_FOUND", {"path": path})
        self.path = path


class UnsupportedFormat(GtaiError):
    def __init__(self, message: str, path: str | None = None):
        super().__init__(message, "UNSUPPORTED_FORMAT", {"path": path})
        self.path = path


class RemoteError(GtaiError):
    """Failure reported by Google Cloud Storage or Translation."""

    error_code = "REMOTE_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, type(self).error_code, details)


class StorageError(RemoteError):
    error_code = "STORAGE_ERROR"


class RegistrationError(RemoteError):
    error_code = "REGISTRATION_ERROR"


class DeletionError(RemoteError):
    error_code = "DELETION_ERROR"


class ProviderError(RemoteError):
    """Pass-through bucket for translation service failures."""

    error_code = "PROVIDER_ERROR"


class TranslationInputError(GtaiError):
    """Rejected before any remote call."""

    def __init__(self, message: str, error_code: str = "TRANSLATION_INPUT_ERROR"):
        super().__init__(message, error_code)


class EmptyTextError(TranslationInputError):
    def __init__(self):
        super().__init__("Text to translate cannot be empty", "EMPTY_TEXT")


class LanguageNotSpecified(TranslationInputError):
    def __init__(self):
        super().__init__("Source and target languages must be specified", "LANGUAGE_NOT_SPECIFIED")


class SameLanguageError(TranslationInputError):
    def __init__(self, language: str):
        super().__init__("Source and target languages cannot be the same", "SAME_LANGUAGE")
        self.language = language


class EmptyTranslationError(GtaiError):
    def __init__(self):
        super().__init__("No translation received from Google Translate API", "EMPTY_TRANSLATION")


def _field(error: Any, name: str) -> Any:
    if isinstance(error, dict):
        return error.get(name)
    return getattr(error, name, None)


def _serialize(error: Any) -> str:
    if isinstance(error, BaseException):
        payload: Any = {"type": type(error).__name__, "args": list(error.args), **vars(error)}
    elif isinstance(error, dict):
        payload = error
    elif hasattr(error, "__dict__"):
        payload = vars(error)
    else:
        payload = error
    try:
        return json.dumps(payload, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return repr(error)


def describe_remote_error(error: Any) -> str:
    """Extract a human readable message from a remote error.

    First match wins:
    1. non-empty string `message` (for native exceptions without one, `str(error)`)
    2. non-empty string `details`
    3. `code` and `message` when both are strings
    4. a full serialization of the error object
    """

    message = _field(error, "message")
    if message is None and isinstance(error, BaseException):
        message = str(error)
    if isinstance(message, str) and message:
        return message

    details = _field(error, "details")
    if isinstance(details, str) and details:
        return details

    code = _field(error, "code")
    if isinstance(code, str) and isinstance(message, str):
        return f"{code} {message}".strip()

    return _serialize(error)


_INVALID_ARGUMENT_TEXT = "Invalid language code or text format. Please check your input."
_PERMISSION_DENIED_TEXT = "Permission denied. Please check your service account permissions."
_QUOTA_EXCEEDED_TEXT = "Translation quota exceeded. Please check your Google Cloud billing."


def _status_name(error: Any) -> str:
    status = getattr(error, "grpc_status_code", None)
    return getattr(status, "name", "") or ""


def map_provider_error(error: BaseException) -> GtaiError:
    """Map a translation failure onto the taxonomy.

    Invalid-argument, permission-denied and quota failures are recognized
    by SDK type or by message content and rewritten to user-facing text.
    Anything else becomes a `ProviderError` carrying the original message.
    """

    if isinstance(error, GtaiError):
        return error

    message = describe_remote_error(error)
    haystack = " ".join((message, str(error), _status_name(error)))
    details = {"original": message}

    if isinstance(error, google_exceptions.InvalidArgument) or "INVALID_ARGUMENT" in haystack:
        return ProviderError(_INVALID_ARGUMENT_TEXT, details)
    if isinstance(error, google_exceptions.PermissionDenied) or "PERMISSION_DENIED" in haystack:
        return ProviderError(_PERMISSION_DENIED_TEXT, details)
    if (
        isinstance(error, google_exceptions.ResourceExhausted)
        or "QUOTA_EXCEEDED" in haystack
        or "RESOURCE_EXHAUSTED" in haystack
    ):
        return ProviderError(_QUOTA_EXCEEDED_TEXT, details)
    return ProviderError(message, details)
