"""
Durable local storage: one UTF-8 file per key under a storage directory.

Stands in for the browser's localStorage. Values are plain strings; callers
encode JSON themselves. Write errors (disk full, permissions) raise OSError so
the caller decides whether they are fatal.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from storefront.utils.config import storage_dir
from storefront.utils.logger import get_logger

logger = get_logger("storage")

APP_STATE_KEY = "app-state"
AUTH_TOKEN_KEY = "auth-token"

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """Key/value string store persisted to `root`."""

    def __init__(self, root: Path | None = None) -> None:
        self._root = Path(root) if root is not None else storage_dir()

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / key

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Storage read failed for %s: %s", key, e)
            return None

    def set_item(self, key: str, value: str) -> None:
        """Write atomically via a sibling temp file, so a crash never leaves half a value."""
        path = self._path(key)
        self._root.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    def keys(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(p.name for p in self._root.iterdir() if p.is_file() and not p.name.startswith("."))
