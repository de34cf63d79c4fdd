"""One-time password reset tokens."""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta

from notemind.database import utcnow
from notemind.exceptions import InvalidOrExpiredToken
from notemind.models.user import User
from notemind.services.passwords import PasswordHasher
from notemind.stores import CredentialStore

logger = logging.getLogger("notemind")

RESET_TOKEN_BYTES = 32
DEFAULT_TTL_MINUTES = 10


def hash_reset_token(token: str) -> str:
    """Deterministic digest stored in place of the plaintext token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class ResetTokenManager:
    """Issues and consumes single-use reset tokens.

    Only the SHA-256 digest of a token is persisted, alongside an expiry.
    Consuming a token replaces the password and clears both columns in one
    conditional write, so a token cannot be redeemed twice.
    """

    def __init__(self, store: CredentialStore, hasher: PasswordHasher, ttl_minutes: int = DEFAULT_TTL_MINUTES) -> None:
        self.store = store
        self.hasher = hasher
        self.ttl = timedelta(minutes=ttl_minutes)

    def issue(self, user: User, now: datetime | None = None) -> str:
        """Generate a token for ``user`` and return the plaintext."""
        now = now or utcnow()
        token = secrets.token_hex(RESET_TOKEN_BYTES)
        self.store.update_fields(
            user.id,
            password_reset_token_hash=hash_reset_token(token),
            password_reset_expires_at=now + self.ttl,
        )
        return token

    def consume(self, token: str, new_password: str, now: datetime | None = None) -> User:
        """Redeem ``token`` by setting ``new_password``.

        Raises InvalidOrExpiredToken for unknown, reused, or expired tokens.
        """
        now = now or utcnow()
        password_hash = self.hasher.hash(new_password)
        user = self.store.claim_reset_token(
            hash_reset_token(token),
            now,
            password_hash=password_hash,
            last_active_at=now,
        )
        if not user:
            logger.info("Rejected password reset with invalid or expired token")
            raise InvalidOrExpiredToken()
        return user
