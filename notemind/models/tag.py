"""Tag model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from notemind.database import Base, utcnow

DEFAULT_TAG_COLOR = "#05D7B3"


class Tag(Base):
    """User-defined label that can be attached to notes."""

    __tablename__ = "tag"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    color = Column(String(32), nullable=False, default=DEFAULT_TAG_COLOR)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
