"""Custom exception hierarchy for the playground."""

from __future__ import annotations


class PlaygroundError(Exception):
    """Base exception for all playground errors."""

    def __init__(self, message: str, phase: str | None = None) -> None:
        self.phase = phase
        super().__init__(message)


class SandboxInitError(PlaygroundError):
    """The sandbox interpreter could not be started or failed to load its packages."""

    def __init__(self, message: str, packages: list[str] | None = None) -> None:
        self.packages = packages or []
        super().__init__(message, phase="sandbox_init")


class SandboxExecutionError(PlaygroundError):
    """The sandbox worker broke down while running code (not a user-code error)."""

    def __init__(self, message: str, code: str = "") -> None:
        self.code = code
        super().__init__(message, phase="sandbox_execution")


class ShareTokenError(PlaygroundError):
    """A share token could not be decoded."""

    def __init__(self, message: str, token: str = "") -> None:
        self.token = token
        super().__init__(message, phase="share_decode")


class CatalogueError(PlaygroundError):
    """Catalogue entry missing or unavailable for the requested language."""

    def __init__(self, message: str, entry_id: str) -> None:
        self.entry_id = entry_id
        super().__init__(message, phase="catalogue")


class ClipboardUnavailableError(PlaygroundError):
    """No clipboard could accept the share link."""

    def __init__(self, message: str = "Clipboard not available") -> None:
        super().__init__(message, phase="share")


class ConfigurationError(PlaygroundError):
    """Controller wiring is incomplete or inconsistent."""

    def __init__(self, message: str) -> None:
        super().__init__(message, phase="configuration")
