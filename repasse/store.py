"""Persistence of the last-used deal input.

The store is passed in by the caller. State lives under a single key:

    ~/.repasse/state.json
        {"repasse_v1": "<serialized DealInput>"}
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Protocol

from repasse.models import DealInput, default_input

logger = logging.getLogger(__name__)

STATE_PATH = Path.home() / ".repasse" / "state.json"
STORAGE_KEY = "repasse_v1"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class JsonFileStore:
    """Keys and serialized values kept in one JSON object on disk.

    A missing or unreadable file behaves as an empty store.
    """

    def __init__(self, path: Path = STATE_PATH) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Ignoring unreadable state file %s", self.path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed state file %s", self.path)
            return {}
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._load()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True


def load_state(store: KeyValueStore, today: date | None = None) -> DealInput:
    """Saved input, or the default input when nothing usable is stored."""
    raw = store.get(STORAGE_KEY)
    if raw is None:
        logger.debug("No saved state, using defaults")
        return default_input(today)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Saved state is not valid JSON, using defaults")
        return default_input(today)
    if not isinstance(data, dict):
        logger.warning("Saved state is not an object, using defaults")
        return default_input(today)
    # Fields missing from the blob keep their default values.
    return DealInput.from_dict({**default_input(today).to_dict(), **data})


def save_state(store: KeyValueStore, deal: DealInput) -> None:
    store.set(STORAGE_KEY, json.dumps(deal.to_dict()))
    logger.debug("Saved state under %s", STORAGE_KEY)


def clear_state(store: KeyValueStore) -> bool:
    """Forget the saved input. Returns whether anything was removed."""
    return store.delete(STORAGE_KEY)
