"""Plain-text rendering of the note list."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Sequence

from .models.note import Note


def _clean_text(value: str) -> str:
    return " ".join(value.split())


def _display_date(created_at: str) -> str:
    try:
        return datetime.fromisoformat(created_at.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return created_at


def render_note_header(note: Note, expanded: bool = False) -> str:
    marker = "v" if expanded else ">"
    parts = [f"{marker} {note.title or 'Untitled Note'}"]
    if note.client_name:
        parts.append(f"client: {_clean_text(note.client_name)}")
    parts.append(_display_date(note.created_at))
    parts.append(f"{len(note.follow_up_items)} follow-up item(s)")
    return f"[{note.id}] " + " | ".join(parts)


def render_note(note: Note, expanded: bool = False) -> str:
    lines: List[str] = [render_note_header(note, expanded)]
    if not expanded:
        lines.append(f"    {_clean_text(note.summary)}")
        return "\n".join(lines)
    lines.append("")
    lines.append("  Summary")
    lines.append(f"    {_clean_text(note.summary)}")
    lines.append("")
    lines.append("  Follow-up items")
    if note.follow_up_items:
        for idx, item in enumerate(note.follow_up_items, start=1):
            lines.append(f"    {idx}. {_clean_text(item)}")
    else:
        lines.append("    (none)")
    lines.append("")
    lines.append("  Transcript")
    for paragraph in note.transcript.splitlines() or [""]:
        if paragraph.strip():
            lines.append(f"    {paragraph.strip()}")
    if note.audio_url:
        lines.append("")
        lines.append(f"  Audio: {note.audio_url}")
    return "\n".join(lines)


def render_notes(notes: Sequence[Note], expanded: Iterable[str] = ()) -> str:
    if not notes:
        return "No notes yet."
    open_ids = set(expanded)
    blocks = [render_note(n, expanded=n.id in open_ids) for n in notes]
    header = f"All Notes ({len(notes)})"
    return header + "\n\n" + "\n\n".join(blocks)
