"""Offline manifest error taxonomy and helpers."""

from __future__ import annotations


class OfflineManifestError(RuntimeError):
    """Stable error carrying a reason code."""

    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        message = f"{code}:{detail}" if detail else code
        super().__init__(message)


class ConfigurationError(OfflineManifestError):
    """Raised when options or cache section settings cannot be honoured."""


class ValidationError(OfflineManifestError):
    """Raised when a cache map rule has an invalid shape."""


class ToolError(OfflineManifestError):
    """Raised once when any cache tool fails during a build step."""


def reason_code(exc: Exception) -> str:
    if isinstance(exc, OfflineManifestError):
        return exc.code
    text = str(exc or "").strip()
    if text.isupper():
        return text
    if ":" in text:
        head = text.split(":", 1)[0].strip()
        if head.isupper():
            return head
    return "INTERNAL_ERROR"
