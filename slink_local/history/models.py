"""
Pydantic models for history records.

The JSON field names (`longURL`, `shortURL`, `date`) are the persisted format;
Python code uses the snake_case attribute names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HistoryRecord(BaseModel):
    """One shortening event and its click counter. Only `clicks` changes."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(frozen=True)
    long_url: str = Field(alias="longURL", min_length=1, frozen=True)
    short_url: str = Field(alias="shortURL", min_length=1, frozen=True)
    created_at: datetime = Field(alias="date", frozen=True)
    clicks: int = Field(default=0, ge=0)

    @field_validator("clicks", mode="before")
    @classmethod
    def _missing_clicks_are_zero(cls, value):
        return 0 if value is None else value

    def to_json(self) -> dict:
        """Dump using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True)

    def clicked(self) -> "HistoryRecord":
        """Return a copy with one more click."""
        return self.model_copy(update={"clicks": self.clicks + 1})
