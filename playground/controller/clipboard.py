"""Clipboard collaborators for share links."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from playground.utils.errors import ClipboardUnavailableError


@runtime_checkable
class Clipboard(Protocol):
    async def write_text(self, text: str) -> None:
        """Place text on the clipboard. Raises on failure."""
        ...


class NoClipboard:
    """Server-side default: there is no user clipboard, so every write fails
    and the controller falls back to presenting the link."""

    async def write_text(self, text: str) -> None:
        raise ClipboardUnavailableError("No clipboard attached to this session")

