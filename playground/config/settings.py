"""Application settings — single source of truth for all configuration."""

from __future__ import annotations

import sys
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Env-driven configuration. All values overridable via environment variables."""

    # ── Core ──────────────────────────────────────────────────────────────
    ENV: Literal["dev", "staging", "prod"] = "dev"
    LOG_LEVEL: str = "INFO"

    # ── Persisted Editor State ────────────────────────────────────────────
    STORE_PATH: str = "/tmp/studyhub-playground/store.json"
    STORE_PREFIX: str = "studyhub"
    DEFAULT_LANGUAGE: Literal["native", "sandboxed"] = "native"
    DEFAULT_EDITOR_THEME: str = "dracula"

    # ── Language Labels ───────────────────────────────────────────────────
    NATIVE_LABEL: str = "Python (inline)"
    SANDBOXED_LABEL: str = "Python (sandbox)"

    # ── Inline Execution ──────────────────────────────────────────────────
    INLINE_VALIDATE: bool = True

    # ── Sandbox Execution ─────────────────────────────────────────────────
    SANDBOX_PYTHON: str = sys.executable
    SANDBOX_PACKAGES: list[str] = ["numpy", "matplotlib"]
    SANDBOX_INIT_TIMEOUT_SEC: int = 120
    SANDBOX_RUN_TIMEOUT_SEC: Optional[int] = None  # None = unbounded

    # ── Sharing ───────────────────────────────────────────────────────────
    SHARE_BASE_URL: str = "http://localhost:8000/playground"

    # ── API ───────────────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
