# JSON Dictionary Store
# File-backed key/value store used for every vault database and for the
# config store. Values are JSON records; the whole mapping is dumped back to
# disk after every mutation (write to a temp file, then os.replace).
#
# One process per file: there is no locking.

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..vault.exceptions import CorruptRecord

logger = logging.getLogger(__name__)


class DictStore:
    """JSON file key/value store with auto-dump.

    Args:
        path: Path to the JSON file. Created (empty) if missing.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._data: Dict[str, Any] = {}
        if self.path.exists() and self.path.stat().st_size > 0:
            self._load()
        else:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._dump()

    @classmethod
    def open_or_create(cls, path: Union[str, Path]) -> "DictStore":
        return cls(path)

    @classmethod
    def open_existing(cls, path: Union[str, Path]) -> "DictStore":
        """Open a store that must already exist."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Store not found: {path}")
        return cls(path)

    @property
    def name(self) -> str:
        return self.path.name

    def _load(self) -> None:
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except ValueError as e:
            raise CorruptRecord(f"Corrupted database {self.name}: {e}") from e
        if not isinstance(data, dict):
            raise CorruptRecord(f"Corrupted database {self.name}: top level is not an object")
        self._data = data

    def _dump(self) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(self._data, fh)
        os.replace(tmp_path, self.path)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        """Get a value by key. Returns default if not found."""
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a value (upsert) and dump to disk."""
        self._data[key] = value
        self._dump()

    def exists(self, key: str) -> bool:
        return key in self._data

    def remove(self, key: str) -> bool:
        """Delete a key. Returns True if the key existed."""
        if key not in self._data:
            return False
        del self._data[key]
        self._dump()
        return True

    def list_keys(self) -> List[str]:
        """Keys in insertion order."""
        return list(self._data)

    def get_all(self) -> Dict[str, Any]:
        return dict(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
