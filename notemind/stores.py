"""Credential stores.

``CredentialStore`` is the persistence seam the auth services talk to. The
SQL implementation backs the running app; the in-memory one is wired in by
tests and demos through the same constructor-injection path.
"""

import itertools
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notemind.database import utcnow
from notemind.exceptions import DuplicateEmail, NotFound
from notemind.models.user import DEFAULT_AVATAR, User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore(ABC):
    """Persistence operations the auth subsystem needs for users."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    def find_by_id(self, user_id: int) -> User | None: ...

    @abstractmethod
    def find_by_reset_token_hash(self, token_hash: str) -> User | None: ...

    @abstractmethod
    def create(self, **fields: Any) -> User:
        """Insert a user. Raises DuplicateEmail if the email is taken."""

    @abstractmethod
    def update_fields(self, user_id: int, **fields: Any) -> User:
        """Set the given columns on a user. Raises NotFound for unknown ids."""

    @abstractmethod
    def claim_reset_token(self, token_hash: str, now: datetime, **fields: Any) -> User | None:
        """Atomically consume a live reset token.

        Applies ``fields`` and clears both reset columns only if a user still
        holds ``token_hash`` with an expiry after ``now``. Returns the updated
        user, or None when no such user exists (wrong, used, or expired).
        """


class SqlCredentialStore(CredentialStore):
    """SQLAlchemy-backed store bound to one request session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_by_reset_token_hash(self, token_hash: str) -> User | None:
        return self.db.query(User).filter(User.password_reset_token_hash == token_hash).first()

    def create(self, **fields: Any) -> User:
        fields["email"] = normalize_email(fields["email"])
        if self.find_by_email(fields["email"]):
            raise DuplicateEmail()

        user = User(**fields)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise DuplicateEmail() from None
        self.db.refresh(user)
        return user

    def update_fields(self, user_id: int, **fields: Any) -> User:
        user = self.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"])
        for key, value in fields.items():
            setattr(user, key, value)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmail("Email already in use") from None
        self.db.refresh(user)
        return user

    def claim_reset_token(self, token_hash: str, now: datetime, **fields: Any) -> User | None:
        user = self.find_by_reset_token_hash(token_hash)
        if not user:
            return None

        result = self.db.execute(
            update(User)
            .where(
                User.id == user.id,
                User.password_reset_token_hash == token_hash,
                User.password_reset_expires_at > now,
            )
            .values(password_reset_token_hash=None, password_reset_expires_at=None, **fields)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount != 1:
            return None

        self.db.refresh(user)
        return user


class InMemoryCredentialStore(CredentialStore):
    """Dict-backed store for tests. Safe to share across threads."""

    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        with self._lock:
            return next((u for u in self._users.values() if u.email == email), None)

    def find_by_id(self, user_id: int) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def find_by_reset_token_hash(self, token_hash: str) -> User | None:
        with self._lock:
            return next((u for u in self._users.values() if u.password_reset_token_hash == token_hash), None)

    def create(self, **fields: Any) -> User:
        fields["email"] = normalize_email(fields["email"])
        now = utcnow()
        fields.setdefault("avatar", DEFAULT_AVATAR)
        fields.setdefault("role", "user")
        fields.setdefault("created_at", now)
        fields.setdefault("last_active_at", now)
        fields.setdefault("password_reset_token_hash", None)
        fields.setdefault("password_reset_expires_at", None)

        with self._lock:
            if any(u.email == fields["email"] for u in self._users.values()):
                raise DuplicateEmail()
            user = User(id=next(self._ids), **fields)
            self._users[user.id] = user
        return user

    def update_fields(self, user_id: int, **fields: Any) -> User:
        if "email" in fields:
            fields["email"] = normalize_email(fields["email"])
        with self._lock:
            user = self._users.get(user_id)
            if not user:
                raise NotFound("User not found")
            if "email" in fields and any(
                u.email == fields["email"] and u.id != user_id for u in self._users.values()
            ):
                raise DuplicateEmail("Email already in use")
            for key, value in fields.items():
                setattr(user, key, value)
        return user

    def claim_reset_token(self, token_hash: str, now: datetime, **fields: Any) -> User | None:
        with self._lock:
            user = next((u for u in self._users.values() if u.password_reset_token_hash == token_hash), None)
            if not user or not user.password_reset_expires_at or user.password_reset_expires_at <= now:
                return None
            for key, value in fields.items():
                setattr(user, key, value)
            user.password_reset_token_hash = None
            user.password_reset_expires_at = None
        return user
