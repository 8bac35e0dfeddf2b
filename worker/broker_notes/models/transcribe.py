from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AnalysisResult(BaseModel):
    """Structured part of the model output."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    follow_up_items: List[str] = Field(default_factory=list, alias="followUpItems")

    @field_validator("summary", mode="before")
    @classmethod
    def _no_summary(cls, value):
        return "" if value is None else value

    @field_validator("follow_up_items", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class TranscribeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    summary: str
    follow_up_items: List[str] = Field(default_factory=list, alias="followUpItems")
