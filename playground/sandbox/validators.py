"""AST-based gate for inline code — rejects escapes from the playground namespace.

Inline code shares the service process, so anything that reaches the
filesystem, the network, other processes, or interpreter internals is
refused before it runs. The sandbox backend does not use this gate.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass


@dataclass
class ValidationResult:
    """Outcome of validating one source text."""

    valid: bool
    error: str | None = None
    warnings: list[str] | None = None


# Builtins that evaluate strings, read files, or reach into namespaces
BLOCKED_BUILTINS = frozenset({
    "exec", "eval", "compile", "__import__", "breakpoint", "input",
    "open", "globals", "locals", "vars", "getattr", "setattr", "delattr",
})

# Attribute names that only make sense on os / sys / shutil style objects
BLOCKED_ATTRIBUTES = frozenset({
    "system", "popen", "spawn", "execv", "execve", "fork", "kill",
    "rmdir", "rmtree", "unlink", "modules", "exit", "_exit",
})

BLOCKED_MODULES = frozenset({
    "os", "sys.modules", "subprocess", "shutil", "pathlib", "socket", "http",
    "urllib", "requests", "httpx", "ftplib", "smtplib", "ctypes", "multiprocessing",
    "threading", "signal", "importlib", "builtins", "inspect", "gc", "pickle",
})

# Modules the built-in lessons use; anything else is allowed but flagged
TEACHING_MODULES = frozenset({
    "math", "random", "statistics", "collections", "itertools", "functools",
    "operator", "datetime", "time", "json", "re", "string", "textwrap", "sys",
    "warnings", "typing", "dataclasses", "enum", "heapq", "bisect", "copy",
    "pprint", "fractions", "decimal", "asyncio",
})

SAFE_DUNDERS = frozenset({"__name__", "__init__", "__doc__", "__len__", "__repr__", "__str__"})


class _Rejected(Exception):
    pass


class _Inspector(ast.NodeVisitor):
    """Walks the tree once, raising _Rejected on the first blocked construct."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    def _check_module(self, name: str) -> None:
        root = name.split(".")[0]
        if root in BLOCKED_MODULES or name in BLOCKED_MODULES:
            raise _Rejected(f"Forbidden import: {name}")
        if root not in TEACHING_MODULES:
            self.warnings.append(f"Unrecognized import: {name}")

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self._check_module(alias.name)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.module:
            self._check_module(node.module)

    def visit_Call(self, node: ast.Call) -> None:
        if isinstance(node.func, ast.Name) and node.func.id in BLOCKED_BUILTINS:
            raise _Rejected(f"Forbidden function call: {node.func.id}()")
        self.generic_visit(node)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        attr = node.attr
        if attr in BLOCKED_ATTRIBUTES:
            raise _Rejected(f"Forbidden attribute access: .{attr}")
        if attr.startswith("__") and attr not in SAFE_DUNDERS:
            raise _Rejected(f"Forbidden dunder access: .{attr}")
        self.generic_visit(node)

    def visit_Name(self, node: ast.Name) -> None:
        # __builtins__, __loader__, __spec__ and friends
        if node.id.startswith("__") and node.id not in SAFE_DUNDERS:
            raise _Rejected(f"Forbidden dunder access: {node.id}")


def validate_code(code: str) -> ValidationResult:
    """Parse and inspect code; valid=True means it may run inline.

    Unknown imports do not fail validation, they come back as warnings.
    """
    try:
        tree = ast.parse(code)
    except SyntaxError as e:
        return ValidationResult(valid=False, error=f"SyntaxError: {e}")

    inspector = _Inspector()
    try:
        inspector.visit(tree)
    except _Rejected as e:
        return ValidationResult(valid=False, error=str(e))

    return ValidationResult(valid=True, warnings=inspector.warnings or None)
