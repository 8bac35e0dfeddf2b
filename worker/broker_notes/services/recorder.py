from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, List, Optional

import numpy as np

logger = logging.getLogger("app.capture")


class RecordingError(RuntimeError):
    """The microphone could not be opened or captured nothing."""


def _default_stream(**kwargs: Any):
    import sounddevice as sd  # lazy import; needs PortAudio at runtime

    return sd.InputStream(**kwargs)


def record_until(
    path: str | Path,
    wait: Callable[[], Any],
    samplerate: int = 48000,
    device: Optional[int] = None,
    stream_factory: Callable[..., Any] = _default_stream,
) -> Path:
    """Capture mono audio from the microphone until ``wait()`` returns.

    Writes a 16-bit WAV to ``path`` and returns it.
    """
    chunks: List[np.ndarray] = []
    lock = threading.Lock()

    def callback(indata, frames, time_info, status):
        if status:
            logger.warning("mic callback status=%s", status)
        mono = indata[:, 0] if indata.ndim == 2 else indata
        with lock:
            chunks.append(np.array(mono, dtype=np.float32, copy=True))

    try:
        stream = stream_factory(
            device=device,
            channels=1,
            samplerate=samplerate,
            dtype="float32",
            callback=callback,
        )
    except Exception as e:
        raise RecordingError(f"Error accessing microphone: {e}") from e

    with stream:
        wait()

    with lock:
        if not chunks:
            raise RecordingError("no audio captured")
        audio = np.concatenate(chunks)

    import soundfile as sf  # lazy import to avoid system lib issues at import time

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(str(out_path), np.clip(audio, -1.0, 1.0), samplerate, subtype="PCM_16")
    logger.info("recorded %.1fs to %s", audio.size / float(samplerate), out_path)
    return out_path
