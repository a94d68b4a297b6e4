"""Output sink — the ordered log of execution results shown to the user."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from playground.utils.logging import get_logger

logger = get_logger(__name__)

# The only markup ever rendered unescaped: the sandbox plot shim's exact image tag,
# with nothing before or after it.
PLOT_IMAGE_PATTERN = re.compile(
    r'<img src="data:image/png;base64,[A-Za-z0-9+/]+={0,2}" style="max-width: 100%; height: auto;">'
)


class OutputKind(str, Enum):
    LOG = "log"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


@dataclass(frozen=True)
class OutputLine:
    """One line of output. ``rich`` lines carry trusted plot markup."""

    text: str
    kind: OutputKind = OutputKind.LOG
    rich: bool = False

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "kind": self.kind.value, "rich": self.rich}


@runtime_checkable
class OutputSurface(Protocol):
    """Display surface that renders the sink.

    Implementations decide how to draw lines; ``rich`` lines may be rendered
    as markup, everything else must be shown literally.
    """

    def show_placeholder(self) -> None: ...

    def append_line(self, line: OutputLine) -> None: ...

    def scroll_to_latest(self) -> None: ...

    def set_loading(self, active: bool) -> None: ...


class OutputSink:
    """Append-only line log with a placeholder state.

    Either the placeholder is showing and there are no lines, or there is at
    least one line. Surface failures are logged and swallowed.
    """

    def __init__(self, surface: OutputSurface | None = None) -> None:
        self._surface = surface
        self._lines: list[OutputLine] = []
        self._placeholder = True
        self._loading = False

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def lines(self) -> tuple[OutputLine, ...]:
        return tuple(self._lines)

    @property
    def is_placeholder(self) -> bool:
        return self._placeholder

    @property
    def is_loading(self) -> bool:
        return self._loading

    def texts(self, kind: OutputKind | None = None) -> list[str]:
        """Line texts, optionally filtered by kind."""
        return [line.text for line in self._lines if kind is None or line.kind == kind]

    # ── Mutation ──────────────────────────────────────────────────────────

    def clear(self) -> None:
        self._lines.clear()
        self._placeholder = True
        self._notify_surface("show_placeholder")

    def append(self, text: str, kind: OutputKind = OutputKind.LOG, *, trusted: bool = False) -> None:
        """Append one line.

        ``trusted`` marks backend-generated output; only then may a line that
        is exactly one plot image tag render as markup.
        """
        line = OutputLine(
            text=text,
            kind=kind,
            rich=trusted and PLOT_IMAGE_PATTERN.fullmatch(text.strip()) is not None,
        )
        self._placeholder = False
        self._lines.append(line)
        self._notify_surface("append_line", line)
        self._notify_surface("scroll_to_latest")

    def set_loading(self, active: bool) -> None:
        self._loading = active
        self._notify_surface("set_loading", active)

    def _notify_surface(self, method: str, *args: object) -> None:
        if self._surface is None:
            return
        try:
            getattr(self._surface, method)(*args)
        except Exception as e:
            logger.warning("Output surface call failed", method=method, error=str(e))
