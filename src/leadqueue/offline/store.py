"""Named-slot storage for offline state.

A slot holds one text value under a name, the same shape as browser
local storage. Two backends:

- FileSlotStore: one file per slot, survives restarts, shared between
  processes pointing at the same directory
- MemoryStore: process-local, for tests and throwaway sessions

Every backend exposes version(slot), a value that changes whenever the
slot is written or deleted. The connection monitor polls it to notice
queue changes made by other processes.

Design constraints:
- File-based only (no database required)
- Writes replace the file atomically so readers never see partial JSON
- I/O failures raise QueueStorageError, never pass silently
"""
import os
import tempfile
from pathlib import Path

from leadqueue.core.receipt import QueueStorageError


class SlotStore:
    """Interface for slot storage backends."""

    def read(self, slot: str) -> str | None:
        """Return slot contents, or None if the slot is empty."""
        raise NotImplementedError

    def write(self, slot: str, value: str) -> None:
        """Replace slot contents."""
        raise NotImplementedError

    def delete(self, slot: str) -> None:
        """Remove the slot. No-op if absent."""
        raise NotImplementedError

    def version(self, slot: str) -> object:
        """Opaque token that changes on every write or delete."""
        raise NotImplementedError


class MemoryStore(SlotStore):
    """In-process slot store."""

    def __init__(self):
        self._slots: dict[str, str] = {}
        self._versions: dict[str, int] = {}

    def read(self, slot: str) -> str | None:
        return self._slots.get(slot)

    def write(self, slot: str, value: str) -> None:
        self._slots[slot] = value
        self._bump(slot)

    def delete(self, slot: str) -> None:
        if slot in self._slots:
            del self._slots[slot]
            self._bump(slot)

    def version(self, slot: str) -> object:
        return self._versions.get(slot, 0)

    def _bump(self, slot: str):
        self._versions[slot] = self._versions.get(slot, 0) + 1


class FileSlotStore(SlotStore):
    """Slot store backed by <directory>/<slot>.json files."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def read(self, slot: str) -> str | None:
        path = self.path_for(slot)
        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise QueueStorageError(f"Cannot read slot {slot} at {path}: {e}") from e

    def write(self, slot: str, value: str) -> None:
        path = self.path_for(slot)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{slot}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise QueueStorageError(f"Cannot write slot {slot} at {path}: {e}") from e

    def delete(self, slot: str) -> None:
        path = self.path_for(slot)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise QueueStorageError(f"Cannot delete slot {slot} at {path}: {e}") from e

    def version(self, slot: str) -> object:
        try:
            stat = self.path_for(slot).stat()
        except FileNotFoundError:
            return None
        return (stat.st_mtime_ns, stat.st_size, stat.st_ino)
