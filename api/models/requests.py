"""Pydantic models for preview API requests."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RenderRequest(BaseModel):
    text: str = ""
    # Overrides the server clock for relative timestamps
    now: Optional[int] = None
    timezone: Optional[str] = None


class FormatRequest(BaseModel):
    action: str
    text: str = ""
    start: int = Field(0, ge=0)
    end: int = Field(0, ge=0)
    language: Optional[str] = None
    url: Optional[str] = None
    epoch: Optional[int] = None
    style: Optional[str] = None

    @model_validator(mode="after")
    def order_selection(self) -> "FormatRequest":
        """Accept selections given back to front (anchor after focus)."""
        if self.start > self.end:
            self.start, self.end = self.end, self.start
        return self

    @field_validator("language", "url", "style", mode="before")
    @classmethod
    def parse_optional_str(cls, v):
        if v == "":
            return None
        return v


class TimestampRequest(BaseModel):
    epoch: int
    style: Optional[str] = None
    now: Optional[int] = None
    timezone: Optional[str] = None
