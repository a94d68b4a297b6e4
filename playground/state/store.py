"""Local key-value store — persists editor contents and preferences as one JSON file."""

from __future__ import annotations

import json
from pathlib import Path

from playground.config.settings import settings
from playground.state.schema import Language
from playground.utils.logging import get_logger

logger = get_logger(__name__)


def code_key(language: Language, prefix: str | None = None) -> str:
    """Store key for a language's saved editor contents."""
    return f"{prefix or settings.STORE_PREFIX}-code-{language.value}"


def theme_key(prefix: str | None = None) -> str:
    """Store key for the editor theme."""
    return f"{prefix or settings.STORE_PREFIX}-editor-theme"


class LocalStore:
    """String-to-string store backed by a JSON file. Last write wins."""

    def __init__(self, path: str | None = None) -> None:
        self._path = Path(path or settings.STORE_PATH)
        self._data: dict[str, str] = self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Store unreadable, starting empty", path=str(self._path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            logger.warning("Store is not a JSON object, starting empty", path=str(self._path))
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()
        logger.debug("Store key written", key=key, size=len(value))

