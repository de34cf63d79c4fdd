"""Password hashing with bcrypt."""

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 12


@lru_cache
def _dummy_hash(rounds: int) -> str:
    # Stand-in checked when no account matches the email
    return bcrypt.hashpw(b"notemind-dummy-password", bcrypt.gensalt(rounds=rounds)).decode("utf-8")


class PasswordHasher:
    """One-way adaptive hashing for account passwords."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with a fresh salt."""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    @property
    def dummy_hash(self) -> str:
        """A valid hash at this cost factor that no real password produces."""
        return _dummy_hash(self.rounds)
