"""
WeatherNotes — Note Form Schemas
=================================

What:  Pydantic models for note data entering and leaving the service layer.
Why:   Form fields arrive as raw strings; these models normalize them once so
       the service applies the blank-title and partial-update rules on clean input.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _strip_or_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class NoteCreate(BaseModel):
    """
    What:  A submitted note from POST /submit.
    How:   A blank title is kept as None; NoteService substitutes "Untitled".
    """
    title: Optional[str] = Field(default=None, description="Note title (optional)")
    content: str = Field(default="", description="Note body")

    @field_validator("title")
    @classmethod
    def blank_title_is_none(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)

    @field_validator("content", mode="before")
    @classmethod
    def missing_content_is_empty(cls, v: Optional[str]) -> str:
        return v or ""


class NoteUpdate(BaseModel):
    """
    What:  A partial update from POST /app-update.
    How:   Blank fields become None, meaning "keep the stored value".
    """
    title: Optional[str] = Field(default=None, description="New title, or blank to keep")
    content: Optional[str] = Field(default=None, description="New body, or blank to keep")

    @field_validator("title", "content")
    @classmethod
    def blank_means_unchanged(cls, v: Optional[str]) -> Optional[str]:
        """Empty or whitespace-only input retains the prior value."""
        if v is None or not v.strip():
            return None
        return v

    def changes(self) -> dict:
        """Only the fields that should overwrite stored values."""
        return self.model_dump(exclude_none=True)
