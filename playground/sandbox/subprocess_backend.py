"""Subprocess backend — a long-lived separate interpreter, started on first use.

Lifecycle: UNINITIALIZED -> INITIALIZING -> READY, or INITIALIZING -> FAILED.
A FAILED backend re-enters INITIALIZING on the next run. Callers that arrive
while initialization is pending await the same task instead of starting a
second worker.
"""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path
from typing import Any

from playground.config.settings import settings
from playground.output.sink import OutputKind, OutputSink
from playground.sandbox.base import NO_OUTPUT_MESSAGE, RunOutcome
from playground.state.schema import BackendState, Language
from playground.utils.errors import SandboxExecutionError, SandboxInitError
from playground.utils.logging import get_logger

logger = get_logger(__name__)

WORKER_PATH = Path(__file__).with_name("worker.py")

# Plot images arrive as a single base64 line; the asyncio default of 64 KiB is too small
_STREAM_LIMIT = 32 * 1024 * 1024

_UNSET: Any = object()


class SubprocessBackend:
    """Run code in a separate Python interpreter with preloaded support packages.

    The worker namespace persists across runs, so definitions from one run
    are visible in the next. Runs are serialized.
    """

    language = Language.SANDBOXED

    def __init__(
        self,
        python_path: str | None = None,
        packages: list[str] | None = None,
        init_timeout_sec: int | None = None,
        run_timeout_sec: int | None = _UNSET,
        stream_limit: int = _STREAM_LIMIT,
    ) -> None:
        self._python_path = python_path or settings.SANDBOX_PYTHON
        self._packages = list(settings.SANDBOX_PACKAGES if packages is None else packages)
        self._init_timeout_sec = init_timeout_sec or settings.SANDBOX_INIT_TIMEOUT_SEC
        self._run_timeout_sec = (
            settings.SANDBOX_RUN_TIMEOUT_SEC if run_timeout_sec is _UNSET else run_timeout_sec
        )
        self._state = BackendState.UNINITIALIZED
        self._process: asyncio.subprocess.Process | None = None
        self._init_task: asyncio.Task[bool] | None = None
        self._stream_limit = stream_limit
        self._run_lock = asyncio.Lock()
        self.launch_count = 0

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> BackendState:
        if self._state is BackendState.READY and self._worker_exited():
            return BackendState.UNINITIALIZED
        return self._state

    @property
    def ready(self) -> bool:
        return self.state is BackendState.READY

    @property
    def packages(self) -> list[str]:
        return list(self._packages)

    def _worker_exited(self) -> bool:
        return self._process is None or self._process.returncode is not None

    # ── Initialization ────────────────────────────────────────────────────

    async def initialize(self, sink: OutputSink) -> bool:
        """Start the worker once; concurrent callers share the pending start."""
        if self.ready:
            return True
        if self._init_task is None or self._init_task.done():
            self._init_task = asyncio.ensure_future(self._start(sink))
        return await asyncio.shield(self._init_task)

    async def _start(self, sink: OutputSink) -> bool:
        self._state = BackendState.INITIALIZING
        await self._kill()
        sink.set_loading(True)
        start = time.monotonic()
        try:
            self.launch_count += 1
            logger.info("Starting sandbox worker", python=self._python_path, packages=self._packages)
            self._process = await asyncio.create_subprocess_exec(
                self._python_path,
                "-u",
                str(WORKER_PATH),
                ",".join(self._packages),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                limit=self._stream_limit,
            )
            report = await asyncio.wait_for(self._read_reply(), timeout=self._init_timeout_sec)
            if not report.get("ready"):
                raise SandboxInitError(
                    f"{report.get('error_type', 'Error')}: {report.get('error', 'worker not ready')}",
                    packages=self._packages,
                )

        except asyncio.TimeoutError:
            return await self._fail_init(
                sink, f"Sandbox did not become ready within {self._init_timeout_sec}s", start
            )

        except Exception as e:
            return await self._fail_init(sink, str(e) or type(e).__name__, start)

        finally:
            sink.set_loading(False)

        self._state = BackendState.READY
        logger.info(
            "Sandbox ready",
            python_version=report.get("python"),
            elapsed=f"{time.monotonic() - start:.2f}s",
        )
        sink.append("Sandbox environment ready!", OutputKind.SUCCESS)
        return True

    async def _fail_init(self, sink: OutputSink, message: str, start: float) -> bool:
        await self._kill()
        self._state = BackendState.FAILED
        logger.warning(
            "Sandbox initialization failed",
            error=message,
            elapsed=f"{time.monotonic() - start:.2f}s",
        )
        sink.append(f"Error initializing sandbox: {message}", OutputKind.ERROR)
        return False

    # ── Execution ─────────────────────────────────────────────────────────

    async def run(self, source: str, sink: OutputSink) -> RunOutcome:
        """Execute source in the worker and append its captured stdout."""
        if not self.ready and not await self.initialize(sink):
            return RunOutcome(
                success=False,
                lines=1,
                error_type="SandboxInitError",
                error_message="Sandbox environment not available",
            )

        async with self._run_lock:
            start = time.monotonic()
            try:
                reply = await asyncio.wait_for(
                    self._request({"action": "execute", "code": source}),
                    timeout=self._run_timeout_sec,
                )

            except asyncio.TimeoutError:
                await self._reset()
                message = f"Execution exceeded {self._run_timeout_sec}s timeout"
                logger.warning("Sandbox execution timed out", timeout=self._run_timeout_sec)
                sink.append(f"Python Error: {message}", OutputKind.ERROR)
                return RunOutcome(
                    success=False,
                    lines=1,
                    execution_time_sec=time.monotonic() - start,
                    error_type="TimeoutError",
                    error_message=message,
                )

            except ValueError:
                # readline() gives up on a reply longer than the stream limit
                await self._reset()
                message = f"Sandbox output exceeds {self._stream_limit} bytes"
                logger.warning("Sandbox reply too large", limit=self._stream_limit)
                sink.append(f"Python Error: {message}", OutputKind.ERROR)
                return RunOutcome(
                    success=False,
                    lines=1,
                    execution_time_sec=time.monotonic() - start,
                    error_type="OutputLimitError",
                    error_message=message,
                )

            except (SandboxExecutionError, OSError) as e:
                await self._reset()
                logger.error("Sandbox worker failure", error=str(e))
                sink.append(f"Python Error: {e}", OutputKind.ERROR)
                return RunOutcome(
                    success=False,
                    lines=1,
                    execution_time_sec=time.monotonic() - start,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )

        elapsed = time.monotonic() - start
        output = str(reply.get("output") or "").rstrip("\n")

        if reply.get("status") != "ok":
            lines = 0
            if output:
                sink.append(output, OutputKind.LOG, trusted=True)
                lines += 1
            error_type = reply.get("error_type") or "Error"
            error = reply.get("error") or ""
            sink.append(f"Python Error: {error_type}: {error}", OutputKind.ERROR)
            logger.info("Sandbox execution raised", error_type=error_type, elapsed=f"{elapsed:.2f}s")
            return RunOutcome(
                success=False,
                lines=lines + 1,
                execution_time_sec=elapsed,
                error_type=error_type,
                error_message=error,
            )

        if output:
            sink.append(output, OutputKind.LOG, trusted=True)
        else:
            sink.append(NO_OUTPUT_MESSAGE, OutputKind.SUCCESS)

        outcome = RunOutcome(success=True, lines=1, execution_time_sec=elapsed)
        logger.info("Sandbox execution finished", summary=outcome.summary())
        return outcome

    async def _request(self, payload: dict[str, Any]) -> dict[str, Any]:
        process = self._process
        if process is None or process.stdin is None:
            raise SandboxExecutionError("Sandbox worker is not running")
        process.stdin.write((json.dumps(payload) + "\n").encode("utf-8"))
        await process.stdin.drain()
        return await self._read_reply()

    async def _read_reply(self) -> dict[str, Any]:
        process = self._process
        if process is None or process.stdout is None:
            raise SandboxExecutionError("Sandbox worker is not running")
        line = await process.stdout.readline()
        if not line:
            raise SandboxExecutionError("Sandbox worker exited unexpectedly")
        try:
            payload = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SandboxExecutionError(f"Malformed reply from sandbox worker: {e}") from e
        if not isinstance(payload, dict):
            raise SandboxExecutionError("Malformed reply from sandbox worker")
        return payload

    # ── Teardown ──────────────────────────────────────────────────────────

    async def _reset(self) -> None:
        """Drop the worker; the next run starts a fresh one."""
        await self._kill()
        self._state = BackendState.UNINITIALIZED
        self._init_task = None

    async def _kill(self) -> None:
        process, self._process = self._process, None
        if process is None or process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            return
        await process.wait()

    async def aclose(self) -> None:
        """Stop the worker gracefully (closing stdin ends its request loop)."""
        process = self._process
        if process is None or process.returncode is not None:
            self._process = None
            return
        if process.stdin is not None:
            process.stdin.close()
        try:
            await asyncio.wait_for(process.wait(), timeout=5)
        except asyncio.TimeoutError:
            logger.warning("Sandbox worker did not exit, killing it")
            await self._kill()
        self._process = None
        self._state = BackendState.UNINITIALIZED
        self._init_task = None

