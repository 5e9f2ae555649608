"""File-backed key/value slots standing in for browser local storage.

Each key maps to one file holding a single string value. A write replaces the
whole value atomically (temp file + rename), so readers never observe a torn
value and concurrent writers simply race to "last write wins".
"""

import logging
import os
import re
import tempfile
from pathlib import Path

from app.core.config import settings

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class LocalStorage:
    """String slots keyed by name under one directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / key

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


storage = LocalStorage(settings.storage_dir)


def get_storage() -> LocalStorage:
    """Dependency for getting the local storage slots."""
    return storage
