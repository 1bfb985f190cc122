"""
kneeklinic/storage/local_store.py

Purpose: Local device key-value storage

- String keys and string values, like the mobile AsyncStorage
- JSON file backend for real use, in-memory backend for tests
- Connection lifecycle mirrors the rest of the app (open on startup, close on shutdown)
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from kneeklinic.core.config import settings
from kneeklinic.core.logging import get_logger

logger = get_logger(__name__)


class InMemoryStore:
    """
    Key-value store kept in process memory.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def multi_get(self, keys: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
        return [(key, self._data.get(key)) for key in keys]

    def multi_set(self, pairs: Iterable[Tuple[str, str]]) -> None:
        for key, value in pairs:
            self._data[key] = value
        self._flush()

    def multi_remove(self, keys: Iterable[str]) -> None:
        removed = [self._data.pop(key, None) for key in keys]
        if any(value is not None for value in removed):
            self._flush()

    def clear(self) -> None:
        self._data.clear()
        self._flush()

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def _flush(self) -> None:
        """Persist hook; memory store has nothing to write."""

    def close(self) -> None:
        """Nothing to release."""


class JsonFileStore(InMemoryStore):
    """
    Key-value store persisted to a single JSON file.

    Every mutation rewrites the file through a temp file + rename so a crash
    never leaves half-written JSON behind.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading local storage from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed local storage file {self.path}")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".storage-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("Local storage saved", extra={"keys": list(self._data.keys())})


# Global store
_store: Optional[InMemoryStore] = None


def open_store(path: Optional[Path] = None) -> InMemoryStore:
    """
    Opens the local store.
    Called during application startup.
    """
    global _store

    if _store is not None:
        logger.warning("Local store already initialized")
        return _store

    store_path = Path(path or settings.STORAGE_PATH)
    _store = JsonFileStore(store_path)
    logger.info(f"Local storage ready: {store_path}")
    return _store


def use_store(store: InMemoryStore) -> InMemoryStore:
    """Installs an already-built store (in-memory store in tests)."""
    global _store
    _store = store
    return _store


def close_store() -> None:
    """
    Releases the local store.
    Called during application shutdown.
    """
    global _store

    if _store is not None:
        _store.close()
        _store = None
        logger.info("Local storage closed")


def get_store() -> InMemoryStore:
    """
    Returns the local store.

    Raises:
        RuntimeError: If the store is not initialized
    """
    if _store is None:
        raise RuntimeError("Local store not initialized. Call open_store() during startup.")
    return _store
