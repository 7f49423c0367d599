"""Pydantic models for preview API responses."""

from typing import List

from pydantic import BaseModel

from editor.selection import WrapResult


class RenderResponse(BaseModel):
    html: str


class SelectionModel(BaseModel):
    start: int
    end: int


class FormatResponse(BaseModel):
    text: str
    selection: SelectionModel

    @classmethod
    def from_result(cls, result: WrapResult) -> "FormatResponse":
        return cls(
            text=result.text,
            selection=SelectionModel(
                start=result.selection.start, end=result.selection.end
            ),
        )


class TimestampResponse(BaseModel):
    token: str
    preview: str
    style: str


class LanguageModel(BaseModel):
    id: str
    name: str
    aliases: List[str]
    loaded: bool


class LanguageLoadResponse(BaseModel):
    id: str
    loaded: bool
