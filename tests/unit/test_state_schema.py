"""Tests for session schema initialization and enums."""

from __future__ import annotations

from playground.config.settings import settings
from playground.state.schema import (
    BackendState,
    Language,
    NotificationKind,
    create_session,
)


class TestStateSchema:
    def test_create_session_defaults(self) -> None:
        session = create_session()
        assert session.current_language is Language(settings.DEFAULT_LANGUAGE)
        assert session.buffer == ""
        assert session.editor_mode == "python"
        assert session.editor_theme == settings.DEFAULT_EDITOR_THEME

    def test_create_session_with_language(self) -> None:
        session = create_session(Language.SANDBOXED, buffer="print(1)")
        assert session.current_language is Language.SANDBOXED
        assert session.buffer == "print(1)"

    def test_language_enum(self) -> None:
        assert Language.NATIVE.value == "native"
        assert Language.SANDBOXED.value == "sandboxed"
        assert Language.NATIVE.label == settings.NATIVE_LABEL
        assert Language.SANDBOXED.label == settings.SANDBOXED_LABEL

    def test_backend_state_enum(self) -> None:
        assert BackendState.UNINITIALIZED.value == "uninitialized"
        assert BackendState.READY.value == "ready"

    def test_notification_kind_enum(self) -> None:
        assert {k.value for k in NotificationKind} == {"success", "error", "info"}
