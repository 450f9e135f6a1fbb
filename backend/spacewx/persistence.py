"""
Key -> JSON text storage behind the profile and mission-log stores.

Backends only move text. Decoding and validation belong to the stores, so a
corrupt record is detected (and recovered from) by the store that owns it.
A file that is not UTF-8 text is reported the same way, as PersistedStateCorrupt.

Writes are best-effort: callers log a failed write and carry on with the
in-memory state.
"""

from __future__ import annotations

import logging
import os
import pathlib
import tempfile
from typing import Protocol

from spacewx.errors import PersistedStateCorrupt

log = logging.getLogger(__name__)


class StateBackend(Protocol):
    def read(self, key: str) -> str | None:
        """Stored text for key, or None if nothing was ever stored."""
        ...

    def write(self, key: str, text: str) -> None:
        ...


class MemoryBackend:
    """Dict-backed storage, for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, text: str) -> None:
        self.data[key] = text


class FileBackend:
    """One JSON file per key under a state directory (created on first write)."""

    def __init__(self, directory: str | os.PathLike[str]):
        self.directory = pathlib.Path(directory)

    def _path(self, key: str) -> pathlib.Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PersistedStateCorrupt(key, "not valid UTF-8") from exc

    def write(self, key: str, text: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # Write-then-rename: readers never see a partial record
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp, path)
        except BaseException:
            pathlib.Path(tmp).unlink(missing_ok=True)
            raise
        log.debug("Saved '%s' (%d bytes).", path, len(text))


def write_best_effort(backend: StateBackend, key: str, text: str) -> bool:
    """Persist without raising. Returns False (and logs) if the write failed."""
    try:
        backend.write(key, text)
    except OSError as exc:
        log.warning("Could not persist '%s': %s", key, exc)
        return False
    return True
