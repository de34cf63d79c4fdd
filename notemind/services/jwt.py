"""JWT Token Service."""

from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from notemind.config import Settings
from notemind.database import utcnow
from notemind.exceptions import ConfigurationError


class JWTService:
    """Handles JWT token creation and validation."""

    def __init__(self, settings: Settings) -> None:
        if not settings.JWT_SECRET_KEY:
            raise ConfigurationError("JWT_SECRET_KEY is not set")
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_days = settings.JWT_EXPIRE_DAYS

    def create_token(self, user_id: int, issued_at: datetime | None = None) -> str:
        """Create a JWT token for the given user."""
        issued_at = issued_at or utcnow()
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def verify_token(self, token: str) -> int | None:
        """Return the user id a token was issued for, or None.

        Bad signatures, expired tokens and garbage all look the same here.
        """
        payload = self.decode_token(token)
        if not payload:
            return None
        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return None
