"""Inline backend — evaluates source inside the service process.

Output is captured through an explicit capture object handed to the code's
namespace rather than by swapping out process-wide streams:

- ``print(...)``                 -> log line
- ``print(..., file=sys.stderr)`` -> error line
- ``warnings.warn(...)``          -> warning line
"""

from __future__ import annotations

import ast
import builtins
import json
import pprint
import sys
import time
import warnings
from contextlib import contextmanager
from typing import Any, Iterator

from playground.config.settings import settings
from playground.output.sink import OutputKind, OutputSink
from playground.sandbox.base import NO_OUTPUT_MESSAGE, RunOutcome
from playground.sandbox.validators import validate_code
from playground.state.schema import BackendState, Language
from playground.utils.logging import get_logger

logger = get_logger(__name__)

_FILENAME = "<playground>"


def format_value(value: Any) -> str:
    """Render one print argument. Containers become indented JSON."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, indent=2, ensure_ascii=False)
        except (TypeError, ValueError):
            return pprint.pformat(value)
    return str(value)


def describe_return_value(value: Any) -> str:
    try:
        rendered = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        rendered = repr(value)
    return f"Return value: {rendered}"


class OutputCapture:
    """Routes one run's output channels into the sink and counts the lines."""

    def __init__(self, sink: OutputSink) -> None:
        self._sink = sink
        self.count = 0

    def write(self, text: str, kind: OutputKind) -> None:
        self.count += 1
        self._sink.append(text, kind)

    def print(
        self,
        *args: Any,
        sep: str | None = " ",
        end: str | None = "\n",
        file: Any = None,
        flush: bool = False,
    ) -> None:
        if file is None or file is sys.stdout or file is sys.__stdout__:
            kind = OutputKind.LOG
        elif file is sys.stderr or file is sys.__stderr__:
            kind = OutputKind.ERROR
        else:
            # Writes to user-owned objects (e.g. io.StringIO) pass straight through
            builtins.print(*args, sep=sep, end=end, file=file, flush=flush)
            return
        self.write((" " if sep is None else sep).join(format_value(a) for a in args), kind)

    def _show_warning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: Any = None,
        line: str | None = None,
    ) -> None:
        self.write(f"{category.__name__}: {message}", OutputKind.WARNING)

    @contextmanager
    def warnings_redirected(self) -> Iterator[None]:
        """Send warnings to the sink; catch_warnings restores the hook on exit."""
        with warnings.catch_warnings():
            warnings.simplefilter("always")
            warnings.showwarning = self._show_warning
            yield


def evaluate(source: str, namespace: dict[str, Any]) -> Any:
    """Execute source; return the value of a trailing expression statement, if any."""
    tree = ast.parse(source, filename=_FILENAME, mode="exec")
    tail: ast.Expression | None = None
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        tail = ast.Expression(body=tree.body.pop().value)
    exec(compile(tree, _FILENAME, "exec"), namespace)
    if tail is not None:
        return eval(compile(tail, _FILENAME, "eval"), namespace)
    return None


class InlineBackend:
    """Evaluate code in a fresh namespace inside the current process.

    Always READY. There is no timeout: code runs on the caller's thread until
    it finishes.
    """

    language = Language.NATIVE

    def __init__(self, validate: bool | None = None) -> None:
        self._validate = settings.INLINE_VALIDATE if validate is None else validate

    @property
    def state(self) -> BackendState:
        return BackendState.READY

    @property
    def ready(self) -> bool:
        return True

    async def initialize(self, sink: OutputSink) -> bool:
        return True

    async def run(self, source: str, sink: OutputSink) -> RunOutcome:
        """Execute source, emitting exactly one terminal outcome to the sink."""
        start = time.monotonic()

        if self._validate:
            validation = validate_code(source)
            if not validation.valid:
                logger.warning("Inline code validation failed", error=validation.error)
                sink.append(f"Error: {validation.error}", OutputKind.ERROR)
                return RunOutcome(
                    success=False,
                    lines=1,
                    execution_time_sec=time.monotonic() - start,
                    error_type="ValidationError",
                    error_message=validation.error,
                )
            if validation.warnings:
                logger.info("Inline code validation warnings", warnings=validation.warnings)

        capture = OutputCapture(sink)
        namespace: dict[str, Any] = {
            "__name__": "__playground__",
            "__builtins__": builtins,
            "print": capture.print,
        }

        try:
            with capture.warnings_redirected():
                result = evaluate(source, namespace)
        except (Exception, SystemExit) as e:
            elapsed = time.monotonic() - start
            capture.write(f"Error: {type(e).__name__}: {e}", OutputKind.ERROR)
            logger.info("Inline execution raised", error_type=type(e).__name__, elapsed=f"{elapsed:.3f}s")
            return RunOutcome(
                success=False,
                lines=capture.count,
                execution_time_sec=elapsed,
                error_type=type(e).__name__,
                error_message=str(e),
            )

        if capture.count == 0:
            if result is not None:
                capture.write(describe_return_value(result), OutputKind.LOG)
            else:
                capture.write(NO_OUTPUT_MESSAGE, OutputKind.SUCCESS)

        outcome = RunOutcome(
            success=True,
            lines=capture.count,
            execution_time_sec=time.monotonic() - start,
        )
        logger.info("Inline execution finished", summary=outcome.summary())
        return outcome
