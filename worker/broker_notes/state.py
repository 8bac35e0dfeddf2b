from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Optional, Tuple

from fastapi import Request

from .config import Settings
from .services.providers import SpeechToText, TextGenerator, build_providers


@dataclass
class State:
    """Per-app state attached to FastAPI's app.state.

    Providers are built on first use so the worker starts without API keys;
    tests assign fakes directly.
    """

    settings: Settings
    speech: Optional[SpeechToText] = None
    generator: Optional[TextGenerator] = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    def providers(self) -> Tuple[SpeechToText, TextGenerator]:
        with self.lock:
            if self.speech is None or self.generator is None:
                speech, generator = build_providers(self.settings)
                self.speech = self.speech or speech
                self.generator = self.generator or generator
            return self.speech, self.generator


def get_state(request: Request) -> State:  # FastAPI dependency helper
    return request.app.state.state
