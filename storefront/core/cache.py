"""
Durable key-value cache for cart snapshots.

Carts use three calls: ``get(key)`` returning a string or ``None``,
``set(key, value)`` and ``delete(key)``. ``FileCache`` keeps every key
in one JSON object on disk so carts survive a restart.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Union

logger = logging.getLogger(__name__)


class Cache(Protocol):
    """String-keyed blob store"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryCache:
    """Process-local cache, lost on restart"""

    def __init__(self):
        self.entries: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    def delete(self, key: str) -> None:
        self.entries.pop(key, None)


class FileCache:
    """
    Cache backed by a single JSON file.

    Reads and writes raise ``OSError`` when the file cannot be accessed;
    callers decide whether that is fatal. A file that does not hold a JSON
    object is treated as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        raw = self.path.read_text(encoding="utf-8")
        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Cache file {self.path} is not valid JSON, starting empty")
            return {}

        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        entries = self._read_all()
        entries[key] = value
        self._write_all(entries)

    def _write_all(self, entries: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(entries), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def delete(self, key: str) -> None:
        entries = self._read_all()
        if key not in entries:
            return
        del entries[key]
        self._write_all(entries)
