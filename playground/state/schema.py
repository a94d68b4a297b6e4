"""Playground session schema — the state every controller operation reads and writes.

The session holds only in-memory editor state. Saved editor contents live in
the LocalStore; backend readiness lives on the backends themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from playground.config.settings import settings


# ── Enums ─────────────────────────────────────────────────────────────────────


class Language(str, Enum):
    """Execution language — one per backend."""

    NATIVE = "native"  # Evaluated inside the service process
    SANDBOXED = "sandboxed"  # Evaluated in the separate interpreter process

    @property
    def label(self) -> str:
        if self is Language.NATIVE:
            return settings.NATIVE_LABEL
        return settings.SANDBOXED_LABEL


class BackendState(str, Enum):
    """Backend lifecycle — the inline backend is permanently READY."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class NotificationKind(str, Enum):
    """Notification severity shown to the user."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


# ── Session ───────────────────────────────────────────────────────────────────


@dataclass
class Session:
    """Mutable editor state for one playground."""

    current_language: Language
    buffer: str = ""
    editor_mode: str = "python"  # Syntax mode hint for the editor surface
    editor_theme: str = settings.DEFAULT_EDITOR_THEME


def editor_mode_for(language: Language) -> str:
    """Syntax highlighting mode for a language. Both backends speak Python."""
    return "python"


def create_session(language: Language | None = None, buffer: str = "") -> Session:
    """Create a fresh session with all fields initialized."""
    lang = language or Language(settings.DEFAULT_LANGUAGE)
    return Session(
        current_language=lang,
        buffer=buffer,
        editor_mode=editor_mode_for(lang),
        editor_theme=settings.DEFAULT_EDITOR_THEME,
    )
