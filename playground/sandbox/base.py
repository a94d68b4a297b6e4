"""Execution backend protocol and run outcome container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from playground.output.sink import OutputSink
from playground.state.schema import BackendState, Language

NO_OUTPUT_MESSAGE = "Code executed successfully (no output)"


@dataclass(frozen=True)
class RunOutcome:
    """Immutable summary of one run. The lines themselves went to the sink."""

    success: bool
    lines: int = 0
    execution_time_sec: float = 0.0
    error_type: str | None = None
    error_message: str | None = None

    @property
    def failed(self) -> bool:
        return not self.success

    def summary(self) -> str:
        """One-line summary for logging."""
        status = "OK" if self.success else f"FAIL ({self.error_type})"
        return f"[{status}] {self.execution_time_sec:.2f}s | lines={self.lines}"


@runtime_checkable
class ExecutionBackend(Protocol):
    """Protocol for code execution backends.

    Implementations:
    - InlineBackend: evaluates source inside the service process
    - SubprocessBackend: long-lived separate interpreter, lazily started
    """

    language: Language

    @property
    def state(self) -> BackendState: ...

    @property
    def ready(self) -> bool: ...

    async def initialize(self, sink: OutputSink) -> bool:
        """Bring the backend to READY. Returns False on (retriable) failure."""
        ...

    async def run(self, source: str, sink: OutputSink) -> RunOutcome:
        """Execute source, appending captured output to the sink.

        User-code failures are reported as error lines, never raised.
        """
        ...
