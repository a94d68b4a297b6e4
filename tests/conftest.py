"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from playground.catalogue.catalogue import Catalogue, default_catalogue
from playground.controller.notifications import NotificationLog
from playground.controller.playground import PlaygroundController
from playground.output.sink import OutputKind, OutputLine, OutputSink
from playground.sandbox.base import RunOutcome
from playground.sandbox.inline_backend import InlineBackend
from playground.state.schema import BackendState, Language, create_session
from playground.state.store import LocalStore


# ── Fakes ─────────────────────────────────────────────────────────────────────


class RecordingSurface:
    """Display surface that records every call in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def show_placeholder(self) -> None:
        self.events.append(("placeholder", None))

    def append_line(self, line: OutputLine) -> None:
        self.events.append(("line", line))

    def scroll_to_latest(self) -> None:
        self.events.append(("scroll", None))

    def set_loading(self, active: bool) -> None:
        self.events.append(("loading", active))


class FakeSandboxBackend:
    """Stand-in for the subprocess backend that never starts a child process.

    ``gate`` (when set) holds initialization open until the test releases it.
    """

    language = Language.SANDBOXED

    def __init__(self, fail_init: bool = False, gate: asyncio.Event | None = None) -> None:
        self.fail_init = fail_init
        self.gate = gate
        self.init_calls = 0
        self.runs: list[str] = []
        self._state = BackendState.UNINITIALIZED

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def ready(self) -> bool:
        return self._state is BackendState.READY

    async def initialize(self, sink: OutputSink) -> bool:
        if self.ready:
            return True
        self.init_calls += 1
        self._state = BackendState.INITIALIZING
        sink.set_loading(True)
        try:
            if self.gate is not None:
                await self.gate.wait()
        finally:
            sink.set_loading(False)
        if self.fail_init:
            self._state = BackendState.FAILED
            sink.append("Error initializing sandbox: boom", OutputKind.ERROR)
            return False
        self._state = BackendState.READY
        return True

    async def run(self, source: str, sink: OutputSink) -> RunOutcome:
        if not self.ready and not await self.initialize(sink):
            return RunOutcome(success=False, lines=1, error_type="SandboxInitError")
        self.runs.append(source)
        sink.append(f"ran: {source}", OutputKind.LOG, trusted=True)
        return RunOutcome(success=True, lines=1)


class FakeClipboard:
    def __init__(self) -> None:
        self.text: str | None = None

    async def write_text(self, text: str) -> None:
        self.text = text


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    """Store backed by a file in a temporary directory."""
    return LocalStore(str(tmp_path / "store.json"))


@pytest.fixture
def catalogue() -> Catalogue:
    return default_catalogue()


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def sink(surface: RecordingSurface) -> OutputSink:
    return OutputSink(surface)


@pytest.fixture
def notifications() -> NotificationLog:
    return NotificationLog()


@pytest.fixture
def fake_sandbox() -> FakeSandboxBackend:
    return FakeSandboxBackend()


@pytest.fixture
def controller(
    store: LocalStore,
    catalogue: Catalogue,
    sink: OutputSink,
    notifications: NotificationLog,
    fake_sandbox: FakeSandboxBackend,
) -> PlaygroundController:
    """Controller on the inline language with a fake sandbox and no clipboard."""
    ctrl = PlaygroundController(
        session=create_session(Language.NATIVE),
        sink=sink,
        store=store,
        notifier=notifications,
        catalogue=catalogue,
        backends={
            Language.NATIVE: InlineBackend(validate=True),
            Language.SANDBOXED: fake_sandbox,
        },
    )
    ctrl.load_saved_state()
    return ctrl


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()
