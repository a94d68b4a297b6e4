#!/usr/bin/env python3
"""Sandbox worker — the separate interpreter behind the sandboxed backend.

Protocol: one JSON object per line on stdin, one JSON reply per line on the
original stdout. The first reply is the readiness report after the support
packages are imported.

This file runs as a script in the child process and must only import the
standard library at module level.
"""

import io
import json
import sys
import traceback
from typing import Any

# Namespace for user code (persists across executions)
NAMESPACE: dict[str, Any] = {"__name__": "__main__"}

PLOT_SHIM = '''
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


def show_plot():
    import io as _io
    import base64 as _base64
    buf = _io.BytesIO()
    plt.savefig(buf, format="png", bbox_inches="tight", dpi=100)
    buf.seek(0)
    img_str = _base64.b64encode(buf.read()).decode()
    plt.close()
    return f'<img src="data:image/png;base64,{img_str}" style="max-width: 100%; height: auto;">'
'''


def load_packages(packages: list[str]) -> None:
    """Import the support packages into the user namespace."""
    for name in packages:
        NAMESPACE[name] = __import__(name)
    if "matplotlib" in packages:
        exec(PLOT_SHIM, NAMESPACE)


def describe_error(exc: BaseException) -> dict[str, str]:
    return {
        "error_type": type(exc).__name__,
        "error": str(exc),
        "traceback": traceback.format_exc(),
    }


def execute_code(code: str) -> dict[str, Any]:
    """Execute code with stdout redirected to a buffer for the duration of the call.

    Stdin is an empty buffer meanwhile, so input() raises EOFError instead of
    reading the next request. On error the reply still carries whatever was
    printed before the exception; the backend shows it ahead of the error line
    rather than dropping it.
    """
    captured = io.StringIO()
    old_stdout, old_stdin = sys.stdout, sys.stdin
    sys.stdout = captured
    sys.stdin = io.StringIO()
    try:
        exec(compile(code, "<sandbox>", "exec"), NAMESPACE)
    except BaseException as e:  # noqa: BLE001 - user code may raise SystemExit
        return {"status": "error", "output": captured.getvalue(), **describe_error(e)}
    finally:
        sys.stdout, sys.stdin = old_stdout, old_stdin
    return {"status": "ok", "output": captured.getvalue()}


def main() -> None:
    """Report readiness, then serve execute requests until stdin closes."""
    channel = sys.stdout
    # Stray writes between requests must not corrupt the reply channel
    sys.stdout = sys.stderr

    def reply(payload: dict[str, Any]) -> None:
        channel.write(json.dumps(payload) + "\n")
        channel.flush()

    packages = [p for p in sys.argv[1].split(",") if p] if len(sys.argv) > 1 else []
    try:
        load_packages(packages)
    except Exception as e:
        reply({"ready": False, **describe_error(e)})
        return
    reply({"ready": True, "packages": packages, "python": sys.version.split()[0]})

    for line in sys.stdin:
        try:
            command = json.loads(line.strip())
            action = command.get("action")

            if action == "execute":
                reply(execute_code(command["code"]))
            elif action == "ping":
                reply({"status": "ok", "message": "pong"})
            else:
                reply({"status": "error", "error_type": "ProtocolError", "error": f"Unknown action: {action}"})

        except json.JSONDecodeError as e:
            reply({"status": "error", "error_type": "ProtocolError", "error": f"Invalid JSON: {e}"})
        except Exception as e:
            reply({"status": "error", **describe_error(e)})


if __name__ == "__main__":
    main()
