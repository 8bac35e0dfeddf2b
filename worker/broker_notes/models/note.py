from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Note(BaseModel):
    """A saved transcript with its generated summary and follow-up items.

    Serialized with the camelCase keys used by the local slot.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: Optional[str] = None
    client_name: Optional[str] = Field(None, alias="clientName")
    transcript: str
    summary: str
    follow_up_items: List[str] = Field(default_factory=list, alias="followUpItems")
    created_at: str = Field(..., alias="createdAt", description="ISO timestamp, set once")
    audio_url: Optional[str] = Field(None, alias="audioUrl")

    def to_slot(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
