"""Durable key/value storage for serialized study data.

Backends store one text record per key:
- JsonFileStorage: ``<directory>/<key>.json`` on local disk, written atomically
- MemoryStorage: in-process dict (tests, ephemeral sessions)
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_STATE_DIR = Path("data/state")


class StorageBackend(Protocol):
    """Minimal durable storage interface."""

    def read(self, key: str) -> str | None:
        """Return the stored record, or None if absent."""
        ...

    def write(self, key: str, data: str) -> None:
        """Replace the stored record.

        Raises:
            OSError: If the record cannot be written
        """
        ...


class JsonFileStorage:
    """One JSON file per key under a state directory."""

    def __init__(self, directory: Path | None = None):
        if directory is None:
            directory = DEFAULT_STATE_DIR
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            logger.debug("study_record_not_found", path=str(path))
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, data: str) -> None:
        """Write the record via temp file + rename.

        Readers never observe a half-written file.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{key}.", suffix=".tmp", dir=self.directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class MemoryStorage:
    """Dict-backed storage. Counts writes for inspection."""

    def __init__(self, records: dict[str, str] | None = None):
        self.records: dict[str, str] = dict(records or {})
        self.write_count = 0

    def read(self, key: str) -> str | None:
        return self.records.get(key)

    def write(self, key: str, data: str) -> None:
        self.records[key] = data
        self.write_count += 1
