"""Playground controller — language switching, run dispatch, and editor persistence.

One controller exists per application. All collaborators are injected so
tests can substitute fakes. Operations are invoked from a single event loop;
the only suspension points are sandbox initialization and sandbox runs. While
either is pending, further run/switch requests are rejected as busy, and while
a switch is pending so are save, reset, template loads and share.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from playground.catalogue.catalogue import Catalogue, TemplateEntry
from playground.config.settings import settings
from playground.controller.clipboard import Clipboard, NoClipboard
from playground.controller.notifications import Notifier
from playground.output.sink import OutputKind, OutputSink
from playground.sandbox.base import ExecutionBackend, RunOutcome
from playground.share.codec import (
    SHARE_QUERY_PARAM,
    ShareToken,
    build_share_url,
    decode_share_token,
    encode_share_token,
)
from playground.state.schema import Language, NotificationKind, Session, editor_mode_for
from playground.state.store import LocalStore, code_key, theme_key
from playground.utils.errors import ConfigurationError, ShareTokenError
from playground.utils.logging import get_logger

logger = get_logger(__name__)

RESET_PROMPT = "Are you sure you want to reset the code? This will clear all your changes."
BUSY_MESSAGE = "Playground is busy, try again shortly"


class PlaygroundController:
    """Orchestrates the editor session, the output sink, and the execution backends."""

    def __init__(
        self,
        *,
        session: Session,
        sink: OutputSink,
        store: LocalStore,
        notifier: Notifier,
        catalogue: Catalogue,
        backends: Mapping[Language, ExecutionBackend],
        clipboard: Clipboard | None = None,
    ) -> None:
        missing = [lang.value for lang in Language if lang not in backends]
        if missing:
            raise ConfigurationError(f"No backend configured for: {', '.join(missing)}")
        for lang, backend in backends.items():
            if backend.language is not lang:
                raise ConfigurationError(
                    f"Backend for {lang.value} reports language {backend.language.value}"
                )

        self._session = session
        self._sink = sink
        self._store = store
        self._notifier = notifier
        self._catalogue = catalogue
        self._backends = dict(backends)
        self._clipboard = clipboard or NoClipboard()
        self._busy: str | None = None  # "run" or "switch" while a suspension is pending

    # ── Read-only views ───────────────────────────────────────────────────

    @property
    def session(self) -> Session:
        return self._session

    @property
    def sink(self) -> OutputSink:
        return self._sink

    @property
    def catalogue(self) -> Catalogue:
        return self._catalogue

    @property
    def busy(self) -> bool:
        return self._busy is not None

    @property
    def sandbox_ready(self) -> bool:
        return self._backends[Language.SANDBOXED].ready

    def backend_for(self, language: Language) -> ExecutionBackend:
        return self._backends[language]

    def snapshot(self) -> dict[str, Any]:
        """Plain-data view of the playground for API responses."""
        language = self._session.current_language
        return {
            "language": language.value,
            "language_label": language.label,
            "buffer": self._session.buffer,
            "editor_mode": self._session.editor_mode,
            "editor_theme": self._session.editor_theme,
            "sandbox_state": self._backends[Language.SANDBOXED].state.value,
            "busy": self.busy,
            "output": [line.to_dict() for line in self._sink.lines],
            "output_placeholder": self._sink.is_placeholder,
            "output_loading": self._sink.is_loading,
        }

    # ── Startup ───────────────────────────────────────────────────────────

    def load_saved_state(self) -> None:
        """Restore the editor theme and the saved code for the current language."""
        self._session.editor_theme = self._store.get(theme_key()) or settings.DEFAULT_EDITOR_THEME
        language = self._session.current_language
        self._session.editor_mode = editor_mode_for(language)
        self._session.buffer = self._saved_or_default(language)
        logger.info(
            "Playground state restored",
            language=language.value,
            theme=self._session.editor_theme,
        )

    def _saved_or_default(self, language: Language) -> str:
        saved = self._store.get(code_key(language))
        return saved if saved else self._catalogue.default_template(language)

    # ── Editor ────────────────────────────────────────────────────────────

    def update_buffer(self, text: str) -> None:
        self._session.buffer = text

    def set_editor_theme(self, theme: str) -> None:
        self._session.editor_theme = theme
        self._store.set(theme_key(), theme)

    def clear_output(self) -> None:
        self._sink.clear()

    # ── Run ───────────────────────────────────────────────────────────────

    async def run_code(self) -> RunOutcome | None:
        """Run the buffer on the current language's backend.

        Returns None when the run was refused (blank buffer, busy) or failed
        at the backend boundary.
        """
        code = self._session.buffer
        if not code.strip():
            self._notify("Please enter some code to run", NotificationKind.INFO)
            return None
        if self._busy is not None:
            self._notify(BUSY_MESSAGE, NotificationKind.INFO)
            return None

        language = self._session.current_language
        backend = self._backends[language]
        self._busy = "run"
        try:
            self._sink.clear()
            self._sink.append(f"Running {language.label} code...", OutputKind.INFO)
            try:
                outcome = await backend.run(code, self._sink)
            except Exception as e:
                logger.error("Backend raised past its boundary", language=language.value, error=str(e))
                self._sink.append(f"Execution error: {e}", OutputKind.ERROR)
                return None
            logger.info("Run completed", language=language.value, summary=outcome.summary())
            return outcome
        finally:
            self._busy = None

    # ── Language ──────────────────────────────────────────────────────────

    async def switch_language(self, language: Language) -> bool:
        """Persist the buffer, load the new language's code, and warm up its backend.

        ``current_language`` changes last, after any sandbox start has finished.
        """
        if self._busy is not None:
            self._notify(BUSY_MESSAGE, NotificationKind.INFO)
            return False

        self._busy = "switch"
        try:
            previous = self._session.current_language
            self._store.set(code_key(previous), self._session.buffer)

            self._session.editor_mode = editor_mode_for(language)
            self._session.buffer = self._saved_or_default(language)

            backend = self._backends[language]
            initialized = backend.ready or await backend.initialize(self._sink)

            self._sink.clear()
            if not initialized:
                self._notify(
                    f"{language.label} is unavailable right now; it will retry on the next run",
                    NotificationKind.ERROR,
                )
            self._notify(f"Switched to {language.label}", NotificationKind.SUCCESS)
            self._session.current_language = language
            logger.info("Language switched", previous=previous.value, current=language.value)
            return True
        finally:
            self._busy = None

    # ── Persistence ───────────────────────────────────────────────────────

    def reset_code(self, confirm: Callable[[str], bool]) -> bool:
        """Replace the buffer with the default template, if the user confirms."""
        if self._switch_pending():
            return False
        if not confirm(RESET_PROMPT):
            return False
        self._session.buffer = self._catalogue.default_template(self._session.current_language)
        self._sink.clear()
        self._notify("Code reset to default", NotificationKind.SUCCESS)
        return True

    def save_code(self) -> None:
        if self._switch_pending():
            return
        self._store.set(code_key(self._session.current_language), self._session.buffer)
        self._notify("Code saved locally", NotificationKind.SUCCESS)

    # ── Catalogue ─────────────────────────────────────────────────────────

    def load_challenge(self, challenge_id: str) -> bool:
        return self._load_entry(self._catalogue.challenge(challenge_id), "challenge", challenge_id)

    def load_snippet(self, snippet_id: str) -> bool:
        return self._load_entry(self._catalogue.snippet(snippet_id), "snippet", snippet_id)

    def _load_entry(self, entry: TemplateEntry | None, kind: str, entry_id: str) -> bool:
        """Overwrite the buffer (not the saved code) with a catalogue template."""
        if self._switch_pending():
            return False
        if entry is None:
            self._notify(f"Unknown {kind}: {entry_id}", NotificationKind.ERROR)
            return False

        language = self._session.current_language
        template = entry.template_for(language)
        if template is None:
            self._notify(
                f"{kind.capitalize()} not available for {language.label}",
                NotificationKind.ERROR,
            )
            return False

        self._session.buffer = template
        self._sink.clear()
        self._notify(f"Loaded {kind}: {entry.title}", NotificationKind.SUCCESS)
        return True

    # ── Sharing ───────────────────────────────────────────────────────────

    async def share_code(self, base_url: str | None = None) -> str | None:
        """Build a share link for the buffer and try to put it on the clipboard.

        Returns the link, or None when there is nothing to share.
        """
        if self._switch_pending():
            return None
        code = self._session.buffer
        if not code.strip():
            self._notify("No code to share", NotificationKind.INFO)
            return None

        token = ShareToken(language=self._session.current_language, code=code)
        url = build_share_url(base_url or settings.SHARE_BASE_URL, encode_share_token(token))

        try:
            await self._clipboard.write_text(url)
        except Exception as e:
            logger.info("Clipboard unavailable, presenting share link", error=str(e))
            self._notify(f"Share URL (copy this): {url}", NotificationKind.INFO)
        else:
            self._notify("Share URL copied to clipboard!", NotificationKind.SUCCESS)
        return url

    async def check_for_shared_code(self, query_params: Mapping[str, str]) -> bool:
        """Load a shared snapshot from query parameters into the editor (never runs it)."""
        raw = query_params.get(SHARE_QUERY_PARAM)
        if raw is None:
            return False

        try:
            token = decode_share_token(raw)
        except ShareTokenError as e:
            logger.warning("Rejected share token", error=str(e))
            self._notify("Invalid share URL", NotificationKind.ERROR)
            return False

        if not await self.switch_language(token.language):
            return False
        self._session.buffer = token.code
        self._notify("Shared code loaded!", NotificationKind.SUCCESS)
        return True

    # ── Internals ─────────────────────────────────────────────────────────

    def _switch_pending(self) -> bool:
        """Refuse buffer operations while a switch waits on its backend.

        During that wait the buffer already holds the new language's code but
        current_language still names the old one.
        """
        if self._busy != "switch":
            return False
        self._notify(BUSY_MESSAGE, NotificationKind.INFO)
        return True

    def _notify(self, message: str, kind: NotificationKind) -> None:
        try:
            self._notifier.notify(message, kind)
        except Exception as e:
            logger.warning("Notifier failed", message=message, error=str(e))
