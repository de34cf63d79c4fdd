"""Tag service for per-user labels."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from notemind.exceptions import DuplicateTag, NotFound
from notemind.models.note import note_tag
from notemind.models.tag import DEFAULT_TAG_COLOR, Tag


class TagService:
    """Handles tag CRUD scoped to a single owner."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def _find_by_name(self, user_id: int, name: str, exclude_id: int | None = None) -> Tag | None:
        query = self.db.query(Tag).filter(Tag.user_id == user_id, func.lower(Tag.name) == name.strip().lower())
        if exclude_id is not None:
            query = query.filter(Tag.id != exclude_id)
        return query.first()

    def create_tag(self, user_id: int, name: str, color: str | None = None) -> Tag:
        """Create a tag. Names are unique per user, ignoring case."""
        if self._find_by_name(user_id, name):
            raise DuplicateTag()

        tag = Tag(user_id=user_id, name=name.strip(), color=color or DEFAULT_TAG_COLOR)
        self.db.add(tag)
        self.db.commit()
        self.db.refresh(tag)
        return tag

    def get_user_tags(self, user_id: int, search: str | None = None) -> list[Tag]:
        """Get all tags for a user, alphabetically."""
        query = self.db.query(Tag).filter(Tag.user_id == user_id)
        if search:
            query = query.filter(Tag.name.ilike(f"%{search}%"))
        return query.order_by(func.lower(Tag.name)).all()

    def get_tag(self, tag_id: int, user_id: int) -> Tag:
        """Get a single tag by ID, scoped to user."""
        tag = self.db.query(Tag).filter(Tag.id == tag_id, Tag.user_id == user_id).first()
        if not tag:
            raise NotFound("Tag not found")
        return tag

    def get_tags_by_ids(self, tag_ids: list[int], user_id: int) -> list[Tag]:
        """Resolve tag ids for attaching to a note. Unknown or foreign ids raise NotFound."""
        unique_ids = set(tag_ids)
        if not unique_ids:
            return []
        tags = self.db.query(Tag).filter(Tag.id.in_(unique_ids), Tag.user_id == user_id).all()
        if len(tags) != len(unique_ids):
            raise NotFound("Tag not found")
        return tags

    def update_tag(self, tag_id: int, user_id: int, name: str | None = None, color: str | None = None) -> Tag:
        tag = self.get_tag(tag_id, user_id)
        if name and name.strip() != tag.name:
            if self._find_by_name(user_id, name, exclude_id=tag.id):
                raise DuplicateTag()
            tag.name = name.strip()
        if color:
            tag.color = color
        self.db.commit()
        self.db.refresh(tag)
        return tag

    def delete_tag(self, tag_id: int, user_id: int) -> None:
        """Delete a tag. Notes carrying it simply lose the label."""
        tag = self.get_tag(tag_id, user_id)
        self.db.execute(note_tag.delete().where(note_tag.c.tag_id == tag.id))
        self.db.delete(tag)
        self.db.commit()
