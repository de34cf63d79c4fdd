"""Note API endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends

from notemind.dependencies import get_ai_service, get_current_user, get_note_service
from notemind.models.user import User
from notemind.schemas.ai import SummarizeNoteRequest, SummaryResponse
from notemind.schemas.note import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate
from notemind.services.ai import AIService
from notemind.services.note import NoteService

router = APIRouter(prefix="/api/v1/notes", tags=["Notes"])


@router.post("/", response_model=NoteResponse, status_code=201)
def create_note(
    body: NoteCreate,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Create a note."""
    note = service.create_note(
        user.id,
        title=body.title,
        content=body.content,
        tag_ids=body.tag_ids,
        color=body.color,
        is_pinned=body.is_pinned,
    )
    return NoteResponse.model_validate(note)


@router.get("/", response_model=NoteListResponse)
def list_notes(
    search: str | None = None,
    tag: int | None = None,
    sort: Literal["newest", "oldest", "title", "updated"] = "newest",
    limit: int = 50,
    offset: int = 0,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
) -> NoteListResponse:
    """List notes with optional search, tag filter and sort."""
    notes, total = service.get_user_notes(user.id, search=search, tag_id=tag, sort=sort, limit=limit, offset=offset)
    return NoteListResponse(items=[NoteResponse.model_validate(n) for n in notes], total=total)


@router.get("/{note_id}", response_model=NoteResponse)
def get_note(
    note_id: int,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Get a single note by ID."""
    return NoteResponse.model_validate(service.get_note(note_id, user.id))


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: int,
    body: NoteUpdate,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Update the provided fields of a note."""
    note = service.update_note(note_id, user.id, **body.model_dump(exclude_unset=True))
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}")
def delete_note(
    note_id: int,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
) -> dict:
    """Delete a note."""
    service.delete_note(note_id, user.id)
    return {"detail": "Note deleted"}


@router.post("/{note_id}/summarize", response_model=SummaryResponse)
def summarize_note(
    note_id: int,
    body: SummarizeNoteRequest | None = None,
    user: User = Depends(get_current_user),
    service: NoteService = Depends(get_note_service),
    ai_service: AIService = Depends(get_ai_service),
) -> SummaryResponse:
    """Summarize a note and save the summary on it."""
    length = body.length if body else "medium"
    result = service.summarize_note(note_id, user.id, ai_service, length=length)
    return SummaryResponse(summary=result.summary, source=result.source)
