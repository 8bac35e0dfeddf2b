import numpy as np
import pytest
import soundfile as sf

from broker_notes.services.recorder import RecordingError, record_until


class FakeStream:
    """Feeds fixed blocks to the callback while the stream is open."""

    def __init__(self, blocks, **kwargs):
        self.blocks = blocks
        self.kwargs = kwargs
        self.closed = False

    def __enter__(self):
        for block in self.blocks:
            self.kwargs["callback"](block, len(block), None, None)
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False


def test_record_writes_wav(tmp_path):
    blocks = [np.full((480, 1), 0.25, dtype=np.float32), np.full((480, 1), -0.25, dtype=np.float32)]
    opened = []

    def factory(**kwargs):
        stream = FakeStream(blocks, **kwargs)
        opened.append(stream)
        return stream

    waited = []
    out = record_until(tmp_path / "rec" / "call.wav", lambda: waited.append(True), samplerate=16000, stream_factory=factory)

    assert waited == [True]
    assert opened[0].closed
    assert opened[0].kwargs["channels"] == 1
    assert opened[0].kwargs["samplerate"] == 16000
    data, sr = sf.read(str(out), dtype="float32")
    assert sr == 16000
    assert data.shape == (960,)
    assert data[0] == pytest.approx(0.25, abs=1e-3)
    assert data[-1] == pytest.approx(-0.25, abs=1e-3)


def test_nothing_captured(tmp_path):
    with pytest.raises(RecordingError):
        record_until(tmp_path / "x.wav", lambda: None, stream_factory=lambda **kw: FakeStream([], **kw))
    assert not (tmp_path / "x.wav").exists()


def test_microphone_unavailable(tmp_path):
    def factory(**kwargs):
        raise OSError("permission denied")

    with pytest.raises(RecordingError):
        record_until(tmp_path / "x.wav", lambda: None, stream_factory=factory)
