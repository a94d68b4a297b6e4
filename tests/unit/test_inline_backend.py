"""Tests for the inline backend's capture and outcome rules."""

from __future__ import annotations

import builtins
import warnings

import pytest

from playground.output.sink import OutputKind, OutputSink
from playground.sandbox.inline_backend import InlineBackend, format_value

NO_OUTPUT = "Code executed successfully (no output)"


@pytest.fixture
def backend() -> InlineBackend:
    return InlineBackend(validate=True)


def kinds(sink: OutputSink) -> list[tuple[str, OutputKind]]:
    return [(line.text, line.kind) for line in sink.lines]


class TestInlineCapture:
    @pytest.mark.asyncio
    async def test_print_becomes_log_line(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        outcome = await backend.run("print('hi')", sink)
        assert outcome.success
        assert kinds(sink) == [("hi", OutputKind.LOG)]

    @pytest.mark.asyncio
    async def test_channels_keep_their_order(self, backend: InlineBackend) -> None:
        code = (
            "import sys\n"
            "import warnings\n"
            "print('first')\n"
            "warnings.warn('careful')\n"
            "print('bad', file=sys.stderr)\n"
            "print('last')\n"
        )
        sink = OutputSink()
        await backend.run(code, sink)
        assert kinds(sink) == [
            ("first", OutputKind.LOG),
            ("UserWarning: careful", OutputKind.WARNING),
            ("bad", OutputKind.ERROR),
            ("last", OutputKind.LOG),
        ]

    @pytest.mark.asyncio
    async def test_print_inside_user_function(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("def greet(n):\n    print('hello', n)\ngreet('ada')", sink)
        assert sink.texts() == ["hello ada"]

    @pytest.mark.asyncio
    async def test_print_sep_is_honoured(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("print('a', 'b', 'c', sep='-')", sink)
        assert sink.texts() == ["a-b-c"]

    @pytest.mark.asyncio
    async def test_containers_are_indented_json(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("print('data:', {'a': [1, 2]})", sink)
        assert sink.texts() == ['data: {\n  "a": [\n    1,\n    2\n  ]\n}']

    def test_format_value_falls_back_for_non_json(self) -> None:
        assert format_value({1, 2}) == "{1, 2}"
        assert format_value([object]) == "[<class 'object'>]"
        assert format_value(3.5) == "3.5"

    @pytest.mark.asyncio
    async def test_global_hooks_are_restored(self, backend: InlineBackend) -> None:
        original_print = builtins.print
        original_showwarning = warnings.showwarning
        sink = OutputSink()
        await backend.run("import warnings\nwarnings.warn('x')\n1 / 0", sink)
        assert builtins.print is original_print
        assert warnings.showwarning is original_showwarning


class TestInlineOutcomes:
    @pytest.mark.asyncio
    async def test_trailing_expression_reported_when_silent(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("x = 40\nx + 2", sink)
        assert kinds(sink) == [("Return value: 42", OutputKind.LOG)]

    @pytest.mark.asyncio
    async def test_trailing_string_is_json_quoted(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("'abc'", sink)
        assert sink.texts() == ['Return value: "abc"']

    @pytest.mark.asyncio
    async def test_trailing_expression_ignored_when_output_exists(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("print('shown')\n42", sink)
        assert sink.texts() == ["shown"]

    @pytest.mark.asyncio
    async def test_silent_code_reports_success(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("x = 1", sink)
        assert kinds(sink) == [(NO_OUTPUT, OutputKind.SUCCESS)]

    @pytest.mark.asyncio
    async def test_exception_becomes_one_error_line(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        outcome = await backend.run("x = 1 / 0", sink)
        assert outcome.failed
        assert outcome.error_type == "ZeroDivisionError"
        assert kinds(sink) == [("Error: ZeroDivisionError: division by zero", OutputKind.ERROR)]

    @pytest.mark.asyncio
    async def test_output_before_exception_is_kept(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        await backend.run("print('step 1')\nraise ValueError('nope')", sink)
        assert kinds(sink) == [
            ("step 1", OutputKind.LOG),
            ("Error: ValueError: nope", OutputKind.ERROR),
        ]

    @pytest.mark.asyncio
    async def test_validation_failure(self, backend: InlineBackend) -> None:
        sink = OutputSink()
        outcome = await backend.run("import os\nos.getcwd()", sink)
        assert outcome.error_type == "ValidationError"
        assert kinds(sink) == [("Error: Forbidden import: os", OutputKind.ERROR)]

    @pytest.mark.asyncio
    async def test_syntax_error_without_validation(self) -> None:
        sink = OutputSink()
        outcome = await InlineBackend(validate=False).run("def broken(:", sink)
        assert outcome.error_type == "SyntaxError"
        assert len(sink.lines) == 1

    @pytest.mark.asyncio
    async def test_system_exit_does_not_escape(self) -> None:
        sink = OutputSink()
        outcome = await InlineBackend(validate=False).run("raise SystemExit(3)", sink)
        assert outcome.failed
        assert sink.texts(OutputKind.ERROR) == ["Error: SystemExit: 3"]

    @pytest.mark.parametrize(
        "code",
        [
            "print('a')",
            "print('a')\nprint('b')",
            "1 + 1",
            "x = 1",
            "None",
            "raise RuntimeError('x')",
            "import warnings\nwarnings.warn('w')",
            "def f():\n    return 3\nf()",
        ],
    )
    @pytest.mark.asyncio
    async def test_exactly_one_terminal_category(self, backend: InlineBackend, code: str) -> None:
        sink = OutputSink()
        await backend.run(code, sink)
        texts = sink.texts()
        assert texts, "a run never leaves the sink empty"
        synthetic_success = [t for t in texts if t == NO_OUTPUT]
        return_values = [t for t in texts if t.startswith("Return value:")]
        if synthetic_success:
            assert texts == [NO_OUTPUT]
        if return_values:
            assert len(texts) == 1
