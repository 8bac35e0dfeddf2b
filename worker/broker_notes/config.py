from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Values may be provided via environment variables (``WORKER_`` prefix) or a
    ``.env`` file. API keys are also picked up from the provider's usual
    variable names.
    """

    # HTTP
    cors_allow_origins: str = Field("*", description="Comma-separated origins")

    # Providers
    provider: str = Field("auto", description="auto|openai|groq")
    openai_api_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("WORKER_OPENAI_API_KEY", "OPENAI_API_KEY")
    )
    openai_base_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("WORKER_OPENAI_BASE_URL", "OPENAI_API_BASE")
    )
    groq_api_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("WORKER_GROQ_API_KEY", "GROQ_API_KEY")
    )
    groq_base_url: str = Field(
        "https://api.groq.com/openai/v1",
        validation_alias=AliasChoices("WORKER_GROQ_BASE_URL", "GROQ_API_BASE"),
    )

    # Transcription
    transcription_model: str = "whisper-1"
    groq_transcription_model: str = "whisper-large-v3"

    # Analysis
    analysis_model: str = "gpt-4o-mini"
    groq_analysis_model: str = "llama-3.1-70b-versatile"
    analysis_temperature: float = Field(0.1, ge=0.0, le=2.0)

    # Local client
    notes_path: str = Field("broker-notes.json", description="Local slot holding saved notes")
    server_url: str = Field("http://127.0.0.1:8000", description="Worker base URL used by the CLI")

    class Config:
        env_prefix = "WORKER_"
        case_sensitive = False
        populate_by_name = True


def load_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
