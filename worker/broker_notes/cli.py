"""CLI entry point."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .client import NotesClient
from .config import load_settings
from .errors import ClientError, StorageError
from .models.note import Note
from .render import render_note, render_notes
from .services.notes import NoteCollection
from .services.recorder import RecordingError, record_until
from .services.storage import JsonFileStorage


def _prompt_confirm(note: Note) -> bool:
    answer = input(f"Are you sure you want to delete this note? ({note.title}) [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def _wait_for_enter() -> None:
    input("Recording... press Enter to stop. ")


def _default_recording_path(notes_path: str) -> Path:
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    return Path(notes_path).expanduser().resolve().parent / "recordings" / f"recording-{stamp}.wav"


def _upload(notes: NoteCollection, server: str, audio_path, title, client_name) -> int:
    print("Processing...", file=sys.stderr)
    try:
        with NotesClient(server) as client:
            note = client.create_note(notes, audio_path, title=title, client_name=client_name)
    except (ClientError, StorageError) as e:
        print(f"Error processing audio. Please try again. ({e})", file=sys.stderr)
        return 1
    print(render_note(note, expanded=True))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="broker-notes")
    parser.add_argument("--notes", help="Path of the local notes file.")
    sub = parser.add_subparsers(dest="command")

    serve_cmd = sub.add_parser("serve", help="Run the transcription worker.")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8000)

    upload_cmd = sub.add_parser("upload", help="Transcribe an audio file and save a note.")
    upload_cmd.add_argument("file", help="Audio file to upload.")
    upload_cmd.add_argument("--title", help="Note title (optional).")
    upload_cmd.add_argument("--client-name", help="Client name (optional).")
    upload_cmd.add_argument("--server", help="Worker base URL.")

    record_cmd = sub.add_parser("record", help="Record from the microphone until Enter, then save a note.")
    record_cmd.add_argument("--title", help="Note title (optional).")
    record_cmd.add_argument("--client-name", help="Client name (optional).")
    record_cmd.add_argument("--server", help="Worker base URL.")
    record_cmd.add_argument("--output", help="Where to keep the WAV file.")
    record_cmd.add_argument("--device", type=int, help="Input device id.")
    record_cmd.add_argument("--rate", type=int, default=48000, help="Sample rate.")

    list_cmd = sub.add_parser("list", help="Show saved notes, newest first.")
    list_cmd.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="ID",
        help="Show full details for this note id. Repeatable.",
    )

    show_cmd = sub.add_parser("show", help="Show one note in full.")
    show_cmd.add_argument("id")

    delete_cmd = sub.add_parser("delete", help="Delete a note.")
    delete_cmd.add_argument("id")
    delete_cmd.add_argument("--yes", action="store_true", help="Skip the confirmation prompt.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    settings = load_settings()

    if args.command == "serve":
        import uvicorn  # lazy import; only needed to serve

        uvicorn.run("broker_notes.app:app", host=args.host, port=args.port)
        return 0

    if args.command is None:
        parser.print_help()
        return 1

    try:
        notes = NoteCollection(JsonFileStorage(args.notes or settings.notes_path))
    except StorageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.command == "upload":
        return _upload(notes, args.server or settings.server_url, args.file, args.title, args.client_name)

    if args.command == "record":
        notes_path = args.notes or settings.notes_path
        target = Path(args.output) if args.output else _default_recording_path(notes_path)
        try:
            audio_path = record_until(target, _wait_for_enter, samplerate=args.rate, device=args.device)
        except RecordingError as e:
            print(f"{e}. Please check permissions.", file=sys.stderr)
            return 1
        return _upload(notes, args.server or settings.server_url, audio_path, args.title, args.client_name)

    if args.command == "list":
        print(render_notes(notes.list(), expanded=args.expand))
        return 0

    if args.command == "show":
        note = notes.get(args.id)
        if note is None:
            print(f"no note with id {args.id}", file=sys.stderr)
            return 1
        print(render_note(note, expanded=True))
        return 0

    if args.command == "delete":
        if notes.get(args.id) is None:
            print(f"no note with id {args.id}")
            return 0
        confirm = None if args.yes else _prompt_confirm
        try:
            deleted = notes.delete(args.id, confirm=confirm)
        except StorageError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        print(f"deleted {args.id}" if deleted else f"kept {args.id}")
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
