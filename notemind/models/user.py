"""User model."""

from sqlalchemy import Column, DateTime, Integer, String

from notemind.database import Base, utcnow

DEFAULT_AVATAR = "https://i.pravatar.cc/300"


class User(Base):
    """Application user."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    name = Column(String(30), nullable=False)
    password_hash = Column(String(256), nullable=False)
    avatar = Column(String(512), nullable=False, default=DEFAULT_AVATAR)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_active_at = Column(DateTime, nullable=False, default=utcnow)
    # SHA-256 hex of the emailed token; the plaintext is never stored
    password_reset_token_hash = Column(String(64), nullable=True, index=True)
    password_reset_expires_at = Column(DateTime, nullable=True)
