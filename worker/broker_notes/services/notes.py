from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..models.note import Note
from ..models.transcribe import TranscribeResponse
from .storage import NoteStorage

logger = logging.getLogger("app.notes")

UNTITLED = "Untitled Note"
TITLE_MAX_CHARS = 50

Confirm = Callable[[Note], bool]


def derive_title(title: Optional[str], summary: Optional[str]) -> str:
    """User title if given, else the summary's first sentence, else a placeholder."""
    title = (title or "").strip()
    if title:
        return title
    if summary:
        first_sentence = re.split(r"[.!?]", summary, maxsplit=1)[0].strip()
        if first_sentence:
            return first_sentence[:TITLE_MAX_CHARS]
    return UNTITLED


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class NoteCollection:
    """Newest-first note list backed by an injected storage slot.

    The slot is read once here and rewritten wholesale on every mutation.
    """

    def __init__(self, storage: NoteStorage, clock: Callable[[], float] = time.time) -> None:
        self._storage = storage
        self._clock = clock
        self._notes: List[Note] = []
        seen = set()
        for note in storage.load():
            if note.id in seen:
                logger.warning("dropping duplicate note id %s from slot", note.id)
                continue
            seen.add(note.id)
            self._notes.append(note)

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self):
        return iter(list(self._notes))

    def list(self) -> List[Note]:
        return list(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def _next_id(self) -> str:
        candidate = int(self._clock() * 1000)
        numeric = [int(n.id) for n in self._notes if n.id.isdigit()]
        if numeric and candidate <= max(numeric):
            candidate = max(numeric) + 1
        return str(candidate)

    def create(
        self,
        result: TranscribeResponse,
        title: Optional[str] = None,
        client_name: Optional[str] = None,
        audio_url: Optional[str] = None,
    ) -> Note:
        """Build a note from an endpoint result and persist it at the front."""
        note = Note(
            id=self._next_id(),
            title=derive_title(title, result.summary),
            client_name=(client_name or "").strip() or None,
            transcript=result.transcript,
            summary=result.summary,
            follow_up_items=list(result.follow_up_items),
            created_at=_utc_now_iso(),
            audio_url=audio_url or None,
        )
        updated = [note, *self._notes]
        self._storage.save(updated)
        self._notes = updated
        logger.info("created note %s (%s)", note.id, note.title)
        return note

    def delete(self, note_id: str, confirm: Optional[Confirm] = None) -> bool:
        """Remove the note with ``note_id``.

        Returns False without touching storage when the id is absent or the
        confirmation callback declines.
        """
        target = self.get(note_id)
        if target is None:
            return False
        if confirm is not None and not confirm(target):
            return False
        updated = [n for n in self._notes if n.id != note_id]
        self._storage.save(updated)
        self._notes = updated
        logger.info("deleted note %s", note_id)
        return True
