"""Pydantic schemas for note endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field

from notemind.schemas.tag import TagResponse


class NoteCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)
    tag_ids: list[int] = []
    color: str | None = Field(default=None, max_length=32)
    is_pinned: bool = False


class NoteUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    content: str | None = Field(default=None, min_length=1)
    summary: str | None = None
    tag_ids: list[int] | None = None
    color: str | None = Field(default=None, max_length=32)
    is_pinned: bool | None = None


class NoteResponse(BaseModel):
    id: int
    title: str
    content: str
    summary: str
    color: str
    is_pinned: bool
    tags: list[TagResponse] = []
    created_at: datetime
    updated_at: datetime
    last_edited_at: datetime

    model_config = {"from_attributes": True}


class NoteListResponse(BaseModel):
    items: list[NoteResponse]
    total: int
