import pytest
from fastapi.testclient import TestClient

from broker_notes.app import create_app
from broker_notes.client import NotesClient, guess_content_type
from broker_notes.config import Settings
from broker_notes.errors import ClientError
from broker_notes.services.notes import NoteCollection
from broker_notes.services.storage import MemoryStorage


class FakeSpeech:
    def transcribe(self, audio, filename):
        return "Client asked about renewing the fleet policy."


class FakeGenerator:
    reply = '{"summary": "Fleet renewal requested. Quote needed.", "followUpItems": ["Prepare quote", "Call Friday"]}'

    def generate(self, prompt, temperature):
        return self.reply


class BrokenSpeech:
    def transcribe(self, audio, filename):
        raise RuntimeError("boom")


def _notes_client(speech):
    app = create_app(Settings())
    app.state.state.speech = speech
    app.state.state.generator = FakeGenerator()
    return NotesClient(http=TestClient(app))


def test_create_note_from_audio_file(tmp_path):
    audio = tmp_path / "call.webm"
    audio.write_bytes(b"\x1aE\xdf\xa3")
    notes = NoteCollection(MemoryStorage())

    note = _notes_client(FakeSpeech()).create_note(notes, audio, client_name="Fleet Co")

    assert note.title == "Fleet renewal requested"
    assert note.client_name == "Fleet Co"
    assert note.transcript == "Client asked about renewing the fleet policy."
    assert note.follow_up_items == ["Prepare quote", "Call Friday"]
    assert note.audio_url == audio.resolve().as_uri()
    assert notes.list() == [note]


def test_failed_request_saves_nothing(tmp_path):
    audio = tmp_path / "call.wav"
    audio.write_bytes(b"RIFF")
    storage = MemoryStorage()
    notes = NoteCollection(storage)

    with pytest.raises(ClientError) as exc:
        _notes_client(BrokenSpeech()).create_note(notes, audio)
    assert exc.value.status_code == 500
    assert str(exc.value) == "Failed to process audio file"
    assert storage.saves == 0
    assert len(notes) == 0


def test_unreadable_file_is_client_error(tmp_path):
    notes = NoteCollection(MemoryStorage())
    with pytest.raises(ClientError):
        _notes_client(FakeSpeech()).create_note(notes, tmp_path / "missing.wav")


def test_non_audio_file_is_rejected_before_upload(tmp_path):
    doc = tmp_path / "minutes.pdf"
    doc.write_bytes(b"%PDF-1.7")
    storage = MemoryStorage()
    notes = NoteCollection(storage)
    speech = FakeSpeech()

    with pytest.raises(ClientError) as exc:
        _notes_client(speech).create_note(notes, doc)
    assert str(exc.value) == "Please select an audio file."
    assert storage.saves == 0


@pytest.mark.parametrize(
    "name,expected",
    [("call.webm", "audio/webm"), ("call.m4a", "audio/mp4"), ("call.mp3", "audio/mpeg")],
)
def test_browser_audio_containers_count_as_audio(name, expected):
    assert guess_content_type(name) == expected
