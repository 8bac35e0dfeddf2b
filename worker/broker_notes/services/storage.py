"""
storage.py: persistence slot for the local note collection.

The whole collection is read at once and rewritten at once; there are no
partial updates. Backends:
  - JsonFileStorage: a single JSON file holding the serialized note array
  - MemoryStorage: in-process list, for tests and throwaway sessions
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import List, Protocol, Sequence

from pydantic import ValidationError

from ..errors import StorageError
from ..models.note import Note


class NoteStorage(Protocol):
    def load(self) -> List[Note]: ...

    def save(self, notes: Sequence[Note]) -> None: ...


class MemoryStorage:
    def __init__(self, notes: Sequence[Note] = ()) -> None:
        self._notes: List[Note] = list(notes)
        self.saves = 0

    def load(self) -> List[Note]:
        return list(self._notes)

    def save(self, notes: Sequence[Note]) -> None:
        self._notes = list(notes)
        self.saves += 1


class JsonFileStorage:
    """Stores the note array in one JSON file. A missing file is an empty slot."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> List[Note]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"cannot read notes from {self.path}: {e}") from e
        if not isinstance(raw, list):
            raise StorageError(f"{self.path} does not hold a list of notes")
        try:
            return [Note.model_validate(item) for item in raw]
        except ValidationError as e:
            raise StorageError(f"{self.path} holds an invalid note: {e}") from e

    def save(self, notes: Sequence[Note]) -> None:
        payload = json.dumps([n.to_slot() for n in notes], ensure_ascii=False, indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in.
            fd, tmp_name = tempfile.mkstemp(prefix=".notes-", dir=str(self.path.parent))
        except OSError as e:
            raise StorageError(f"cannot write notes to {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"cannot write notes to {self.path}: {e}") from e
