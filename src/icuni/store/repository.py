"""Durable storage for the persisted app state.

The store never writes storage directly; it hands a ``PersistedState`` to a
``DraftRepository`` after each mutation. ``JsonFileRepository`` mirrors
browser local storage: one JSON file mapping namespaced keys to blobs, with
the app state living under a single fixed key.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..config import config
from ..models import PersistedState

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend cannot be read or written."""


class DraftRepository(ABC):
    """Abstract persistence backend for the app state."""

    @abstractmethod
    def save(self, state: PersistedState) -> None:
        """Persist the state.

        Raises:
            StorageError: If the write fails.
        """
        ...

    @abstractmethod
    def load(self) -> Optional[PersistedState]:
        """Return the stored state, or None if nothing usable is stored.

        Raises:
            StorageError: If the backend cannot be read.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove the stored state."""
        ...


def _decode(blob: Any) -> Optional[PersistedState]:
    try:
        return PersistedState.model_validate(blob)
    except ValidationError as e:
        if not isinstance(blob, dict):
            logger.warning(f"Discarding unreadable stored state: {e}")
            return None
        logger.warning(f"Stored state has invalid fields, resetting them to defaults: {e}")
        return PersistedState.salvage(blob)


class MemoryRepository(DraftRepository):
    """Keeps the serialized state in memory. Used by tests and one-off stores."""

    def __init__(self) -> None:
        self._blob: Optional[str] = None
        self.save_count = 0

    @property
    def raw(self) -> Optional[Dict[str, Any]]:
        """The last saved blob as plain JSON data."""
        return json.loads(self._blob) if self._blob is not None else None

    def save(self, state: PersistedState) -> None:
        self._blob = state.model_dump_json(by_alias=True)
        self.save_count += 1

    def load(self) -> Optional[PersistedState]:
        if self._blob is None:
            return None
        return _decode(json.loads(self._blob))

    def clear(self) -> None:
        self._blob = None


class JsonFileRepository(DraftRepository):
    """Stores the state under a fixed key inside a JSON key/value file."""

    def __init__(
        self,
        path: Optional[Path] = None,
        key: Optional[str] = None,
    ) -> None:
        """Initialize the repository.

        Args:
            path: Storage file. Defaults to config.storage_path.
            key: Namespaced key of the app state. Defaults to config.storage_key.
        """
        self._path = Path(path or config.storage_path)
        self._key = key or config.storage_key

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        return self._key

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Storage file {self._path} is corrupt, ignoring it: {e}")
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read {self._path}: {e}") from e

        if not isinstance(data, dict):
            logger.warning(f"Storage file {self._path} does not hold an object, ignoring it")
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self._path}: {e}") from e

    def save(self, state: PersistedState) -> None:
        data = self._read_all()
        data[self._key] = state.model_dump(mode="json", by_alias=True)
        self._write_all(data)
        logger.debug(f"Saved app state to {self._path} [{self._key}]")

    def load(self) -> Optional[PersistedState]:
        blob = self._read_all().get(self._key)
        if blob is None:
            return None
        return _decode(blob)

    def clear(self) -> None:
        data = self._read_all()
        if self._key in data:
            del data[self._key]
            self._write_all(data)
