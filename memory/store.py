"""
Key-Value Store
---------------
Small persistent key-value storage shared by the usage recommender
and the notes skill.

Stores entries to disk in YAML format, keeping insertion order.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import logging
import os

import yaml


class InMemoryStore:
    """
    Non-persistent store with the same interface as KeyValueStore.
    Used for ephemeral runs and tests.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        """Get a copy of a stored value."""
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        if key in self._data:
            del self._data[key]
            return True
        return False

    def keys(self) -> List[str]:
        return list(self._data.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._data


class KeyValueStore(InMemoryStore):
    """
    YAML file-backed store.

    Every mutation is written to disk before it is applied in memory. A
    failed write raises OSError and leaves both unchanged.
    """

    def __init__(self, store_path: Optional[str] = None):
        super().__init__()
        self._path = Path(store_path) if store_path else Path("megh_store.yaml")
        self._logger = logging.getLogger("megh.memory.store")

        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        """Load entries from disk."""
        if not self._path.exists():
            return

        try:
            with open(self._path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            self._logger.error(f"Failed to load store {self._path}: {e}")
            return

        if isinstance(data, dict):
            self._data = data
            self._logger.info(f"Loaded {len(self._data)} entries from {self._path}")
        elif data is not None:
            self._logger.error(f"Ignoring store {self._path}: root is not a mapping")

    def _save(self, data: Dict[str, Any]) -> None:
        """
        Write entries to disk atomically.

        The YAML goes to a sibling temp file that then replaces the store,
        so a failed write leaves the previous file intact. Raises OSError or
        yaml.YAMLError.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with open(tmp_path, 'w', encoding="utf-8") as f:
                yaml.safe_dump(
                    data, f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            os.replace(tmp_path, self._path)
        except (OSError, yaml.YAMLError):
            tmp_path.unlink(missing_ok=True)
            raise
        self._logger.debug("Store saved")

    def set(self, key: str, value: Any) -> None:
        """Persist first; memory only changes once the write succeeded."""
        data = dict(self._data)
        data[key] = copy.deepcopy(value)
        self._save(data)
        self._data = data

    def remove(self, key: str) -> bool:
        if key not in self._data:
            return False
        data = dict(self._data)
        del data[key]
        self._save(data)
        self._data = data
        return True
