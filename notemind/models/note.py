"""Note model and its tag association."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from notemind.database import Base, utcnow

DEFAULT_NOTE_COLOR = "#ffffff"

note_tag = Table(
    "note_tag",
    Base.metadata,
    Column("note_id", Integer, ForeignKey("note.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


class Note(Base):
    """A user's note."""

    __tablename__ = "note"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=False)
    summary = Column(Text, nullable=False, default="")
    color = Column(String(32), nullable=False, default=DEFAULT_NOTE_COLOR)
    is_pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_edited_at = Column(DateTime, nullable=False, default=utcnow)

    tags = relationship("Tag", secondary=note_tag, lazy="selectin", order_by="Tag.name")
