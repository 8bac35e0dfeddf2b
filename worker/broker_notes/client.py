"""HTTP client for the transcription endpoint.

Any ``httpx.Client`` can be supplied, including FastAPI's ``TestClient`` for
in-process use.
"""
from __future__ import annotations

import mimetypes
import os
from pathlib import Path
from typing import Optional

import httpx

from .errors import ClientError
from .models.note import Note
from .models.transcribe import TranscribeResponse
from .services.notes import NoteCollection


# Containers browsers record into; mimetypes maps some of them to video/*.
_AUDIO_TYPES = {
    ".webm": "audio/webm",
    ".weba": "audio/webm",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".opus": "audio/opus",
    ".m4a": "audio/mp4",
}


def guess_content_type(filename: str) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix in _AUDIO_TYPES:
        return _AUDIO_TYPES[suffix]
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


class NotesClient:
    def __init__(self, base_url: str = "http://127.0.0.1:8000", http: Optional[httpx.Client] = None) -> None:
        self._http = http or httpx.Client(base_url=base_url, timeout=None)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "NotesClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def transcribe(
        self,
        audio: bytes,
        filename: str = "recording.webm",
        title: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> TranscribeResponse:
        content_type = guess_content_type(filename)
        data = {"title": title or "", "clientName": client_name or ""}
        try:
            resp = self._http.post(
                "/api/transcribe",
                files={"audio": (filename, audio, content_type)},
                data=data,
            )
        except httpx.HTTPError as e:
            raise ClientError(f"could not reach worker: {e}") from e
        if resp.status_code != 200:
            try:
                message = resp.json().get("error") or resp.text
            except ValueError:
                message = resp.text
            raise ClientError(message or f"HTTP {resp.status_code}", status_code=resp.status_code)
        return TranscribeResponse.model_validate(resp.json())

    def create_note(
        self,
        collection: NoteCollection,
        audio_path: str | os.PathLike,
        title: Optional[str] = None,
        client_name: Optional[str] = None,
    ) -> Note:
        """Send an audio file for processing and save the result as a note.

        Nothing is saved when the request fails.
        """
        path = Path(audio_path)
        if not guess_content_type(path.name).startswith("audio/"):
            raise ClientError("Please select an audio file.")
        try:
            audio = path.read_bytes()
        except OSError as e:
            raise ClientError(f"cannot read {path}: {e}") from e
        result = self.transcribe(audio, filename=path.name, title=title, client_name=client_name)
        return collection.create(
            result,
            title=title,
            client_name=client_name,
            audio_url=path.resolve().as_uri(),
        )
