"""Note service for CRUD, search and summaries."""

from sqlalchemy import or_
from sqlalchemy.orm import Session

from notemind.database import utcnow
from notemind.exceptions import NotFound
from notemind.models.note import DEFAULT_NOTE_COLOR, Note
from notemind.models.tag import Tag
from notemind.services.ai import NOTE_SUMMARY_PROMPT, AIService, SummaryResult
from notemind.services.tag import TagService

SORT_ORDERS = {
    "newest": Note.created_at.desc(),
    "oldest": Note.created_at.asc(),
    "title": Note.title.asc(),
    "updated": Note.last_edited_at.desc(),
}


class NoteService:
    """Handles notes for a single owner at a time."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.tags = TagService(db)

    def create_note(
        self,
        user_id: int,
        title: str,
        content: str,
        tag_ids: list[int] | None = None,
        color: str | None = None,
        is_pinned: bool = False,
    ) -> Note:
        """Create a note in the database."""
        note = Note(
            user_id=user_id,
            title=title.strip(),
            content=content,
            color=color or DEFAULT_NOTE_COLOR,
            is_pinned=is_pinned,
            summary="",
        )
        note.tags = self.tags.get_tags_by_ids(tag_ids or [], user_id)
        self.db.add(note)
        self.db.commit()
        self.db.refresh(note)
        return note

    def get_user_notes(
        self,
        user_id: int,
        search: str | None = None,
        tag_id: int | None = None,
        sort: str = "newest",
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Note], int]:
        """Get notes for a user, pinned first. Returns (items, total_count)."""
        query = self.db.query(Note).filter(Note.user_id == user_id)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Note.title.ilike(pattern), Note.content.ilike(pattern)))

        if tag_id is not None:
            query = query.filter(Note.tags.any(Tag.id == tag_id))

        total = query.count()
        order = SORT_ORDERS.get(sort, SORT_ORDERS["newest"])
        items = query.order_by(Note.is_pinned.desc(), order, Note.id.desc()).offset(offset).limit(limit).all()
        return items, total

    def get_note(self, note_id: int, user_id: int) -> Note:
        """Get a single note by ID, scoped to user."""
        note = self.db.query(Note).filter(Note.id == note_id, Note.user_id == user_id).first()
        if not note:
            raise NotFound("Note not found")
        return note

    def update_note(self, note_id: int, user_id: int, **fields) -> Note:
        """Apply the provided fields. ``tag_ids`` replaces the tag set."""
        note = self.get_note(note_id, user_id)

        tag_ids = fields.pop("tag_ids", None)
        if tag_ids is not None:
            note.tags = self.tags.get_tags_by_ids(tag_ids, user_id)

        for key, value in fields.items():
            if value is None:
                continue
            if key == "title":
                value = value.strip()
            setattr(note, key, value)

        note.last_edited_at = utcnow()
        self.db.commit()
        self.db.refresh(note)
        return note

    def delete_note(self, note_id: int, user_id: int) -> None:
        note = self.get_note(note_id, user_id)
        self.db.delete(note)
        self.db.commit()

    def summarize_note(self, note_id: int, user_id: int, ai_service: AIService, length: str = "medium") -> SummaryResult:
        """Summarize a note's content and store the summary on it."""
        note = self.get_note(note_id, user_id)
        result = ai_service.summarize(
            note.content,
            prompt=NOTE_SUMMARY_PROMPT.format(text=note.content),
            length=length,
        )
        note.summary = result.summary
        note.last_edited_at = utcnow()
        self.db.commit()
        return result
