"""Pydantic request/response models for the API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from playground.state.schema import Language


# ── Requests ──────────────────────────────────────────────────────────────────


class BufferUpdateRequest(BaseModel):
    """New editor contents."""

    code: str = Field(..., description="Full editor buffer")


class LanguageSwitchRequest(BaseModel):
    """Switch the active language."""

    language: Language = Field(..., examples=["native", "sandboxed"])


class ResetRequest(BaseModel):
    """Reset the editor; destructive, so the client must confirm."""

    confirm: bool = Field(default=False, description="User confirmed the reset")


class ShareRequest(BaseModel):
    """Build a share link."""

    base_url: Optional[str] = Field(
        default=None,
        description="Page URL the link should point at (default from config)",
    )


class ThemeRequest(BaseModel):
    """Change the editor theme."""

    theme: str = Field(..., min_length=1, max_length=64, examples=["dracula", "monokai"])


# ── Responses ─────────────────────────────────────────────────────────────────


class NotificationModel(BaseModel):
    message: str
    kind: str


class OutputLineModel(BaseModel):
    text: str
    kind: str
    rich: bool = False


class PlaygroundSnapshot(BaseModel):
    """Current editor, language, and output state."""

    language: str
    language_label: str
    buffer: str
    editor_mode: str
    editor_theme: str
    sandbox_state: str
    busy: bool = False
    output: list[OutputLineModel] = []
    output_placeholder: bool = True
    output_loading: bool = False


class PlaygroundResponse(BaseModel):
    """Snapshot plus the notifications raised while handling the request."""

    playground: PlaygroundSnapshot
    notifications: list[NotificationModel] = []
    result: Optional[dict[str, Any]] = None


class CatalogueEntryModel(BaseModel):
    id: str
    title: str
    description: str = ""
    languages: list[str] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "0.1.0"
    sandbox_state: str = ""
    sandbox_packages: list[str] = []
