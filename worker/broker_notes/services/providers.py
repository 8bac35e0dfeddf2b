from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from openai import OpenAI

from ..config import Settings

logger = logging.getLogger("app")


class SpeechToText(Protocol):
    def transcribe(self, audio: bytes, filename: str) -> str: ...


class TextGenerator(Protocol):
    def generate(self, prompt: str, temperature: float) -> str: ...


class ProviderNotConfigured(RuntimeError):
    pass


@dataclass(frozen=True)
class ProviderChoice:
    name: str
    api_key: str
    base_url: Optional[str]
    transcription_model: str
    analysis_model: str


def _provider_and_model(settings: Settings) -> Tuple[str, Optional[str]]:
    provider = (settings.provider or "auto").strip().lower()
    if provider == "auto":
        if settings.openai_api_key:
            provider = "openai"
        elif settings.groq_api_key:
            provider = "groq"
    model = None
    if provider == "openai":
        model = settings.analysis_model
    elif provider == "groq":
        model = settings.groq_analysis_model
    return provider, model


def resolve_provider(settings: Settings) -> ProviderChoice:
    """Pick the hosted provider from settings.

    ``auto`` prefers OpenAI when its key is present, then Groq.
    """
    provider, model = _provider_and_model(settings)
    if provider == "openai" and settings.openai_api_key:
        return ProviderChoice(
            name="openai",
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            transcription_model=settings.transcription_model,
            analysis_model=model or settings.analysis_model,
        )
    if provider == "groq" and settings.groq_api_key:
        return ProviderChoice(
            name="groq",
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            transcription_model=settings.groq_transcription_model,
            analysis_model=model or settings.groq_analysis_model,
        )
    raise ProviderNotConfigured(f"no API key configured for provider '{provider}'")


def _client(choice: ProviderChoice) -> OpenAI:
    # Groq exposes an OpenAI-compatible API, so one client type covers both.
    return OpenAI(api_key=choice.api_key, base_url=choice.base_url, max_retries=0)


class HostedSpeechToText:
    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def transcribe(self, audio: bytes, filename: str) -> str:
        result = self._client.audio.transcriptions.create(
            model=self._model,
            file=(filename, audio),
        )
        return getattr(result, "text", None) or ""


class HostedTextGenerator:
    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def generate(self, prompt: str, temperature: float) -> str:
        res = self._client.chat.completions.create(
            model=self._model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
        )
        if not res.choices:
            return ""
        return res.choices[0].message.content or ""


def build_providers(settings: Settings) -> Tuple[SpeechToText, TextGenerator]:
    choice = resolve_provider(settings)
    client = _client(choice)
    logger.info(
        "using provider %s (transcription=%s, analysis=%s)",
        choice.name,
        choice.transcription_model,
        choice.analysis_model,
    )
    return (
        HostedSpeechToText(client, choice.transcription_model),
        HostedTextGenerator(client, choice.analysis_model),
    )
