"""
File-backed key-value store.

The desktop counterpart of browser local storage: one JSON file holding a
flat {key: string} map. Every write rewrites the whole file through a
temporary file and an atomic rename, so a crash never leaves half a file.
Fail-fast: raises StorageError on I/O problems, never returns fallback values.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from clients.errors import StorageError

logger = logging.getLogger(__name__)


class LocalStore:
    """
    Key-value store persisted to a single JSON file.

    Usage:
        store = LocalStore(Path("data/invoices.json"))
        store.set("key", "value")
        value = store.get("key")  # Returns None if missing
    """

    def __init__(self, path: Path | str):
        """
        Args:
            path: File to read/write. Parent directories are created on first write.
        """
        self.path = Path(path)
        logger.info("LocalStore using %s", self.path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Corrupt store file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Corrupt store file {self.path}: expected a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        """Get value by key. Returns None if key doesn't exist."""
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        """Set key to value."""
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns True if key existed and was deleted, False if key didn't exist.
        """
        data = self._read_all()
        if key not in data:
            return False
        del data[key]
        self._write_all(data)
        return True

    def exists(self, key: str) -> bool:
        """Check if key exists."""
        return key in self._read_all()

    def set_json(self, key: str, value: dict | list) -> None:
        """Set key to JSON-serialized value."""
        self.set(key, json.dumps(value))

    def get_json(self, key: str) -> dict | list | None:
        """
        Get and deserialize JSON value.

        Returns None if key doesn't exist.
        Raises StorageError if value is not valid JSON.
        """
        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in key '{key}': {e}") from e

    def close(self) -> None:
        """Nothing to release; present for interface parity with ValkeyStore."""
