"""Pydantic schemas for AI endpoints."""

from typing import Literal

from pydantic import BaseModel

SummaryLength = Literal["short", "medium", "long"]


class SummarizeRequest(BaseModel):
    text: str
    prompt: str | None = None
    length: SummaryLength = "medium"
    allow_fallback: bool = True


class SummarizeNoteRequest(BaseModel):
    length: SummaryLength = "medium"


class SummaryResponse(BaseModel):
    summary: str
    source: str


class AISettingsResponse(BaseModel):
    configured: bool
    api_key: str
    model: str
