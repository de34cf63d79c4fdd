"""Authentication service."""

import logging
from dataclasses import dataclass

from notemind.config import Settings
from notemind.database import utcnow
from notemind.exceptions import DuplicateEmail, InvalidCredentials, NotFound, Unauthorized
from notemind.models.user import User
from notemind.services.jwt import JWTService
from notemind.services.passwords import PasswordHasher
from notemind.services.reset_tokens import ResetTokenManager
from notemind.stores import CredentialStore

logger = logging.getLogger("notemind")


@dataclass
class AuthResult:
    """A user together with a freshly issued bearer token."""

    user: User
    token: str


class AuthService:
    """Handles registration, login, password changes and resets."""

    def __init__(
        self,
        store: CredentialStore,
        hasher: PasswordHasher,
        jwt_service: JWTService,
        reset_tokens: ResetTokenManager,
    ) -> None:
        self.store = store
        self.hasher = hasher
        self.jwt_service = jwt_service
        self.reset_tokens = reset_tokens

    @classmethod
    def from_settings(cls, store: CredentialStore, settings: Settings) -> "AuthService":
        hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
        return cls(
            store=store,
            hasher=hasher,
            jwt_service=JWTService(settings),
            reset_tokens=ResetTokenManager(store, hasher, ttl_minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
        )

    def _issue(self, user: User) -> AuthResult:
        return AuthResult(user=user, token=self.jwt_service.create_token(user.id))

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Register a new user. Raises DuplicateEmail if the email is taken."""
        if self.store.find_by_email(email):
            raise DuplicateEmail()

        user = self.store.create(
            name=name.strip(),
            email=email,
            password_hash=self.hasher.hash(password),
        )
        logger.info("Registered user %s", user.id)
        return self._issue(user)

    def login(self, email: str, password: str) -> AuthResult:
        """Authenticate by email and password.

        Unknown email and wrong password raise the same error.
        """
        user = self.store.find_by_email(email)
        if not user:
            # Same bcrypt cost as a wrong password
            self.hasher.verify(password, self.hasher.dummy_hash)
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            raise InvalidCredentials()

        user = self.store.update_fields(user.id, last_active_at=utcnow())
        logger.info("User %s logged in", user.id)
        return self._issue(user)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> AuthResult:
        """Replace the password after re-checking the current one."""
        user = self.store.find_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        if not self.hasher.verify(current_password, user.password_hash):
            raise InvalidCredentials("Current password is incorrect")

        user = self.store.update_fields(user.id, password_hash=self.hasher.hash(new_password))
        logger.info("User %s changed password", user.id)
        return self._issue(user)

    def request_password_reset(self, email: str) -> str:
        """Issue a reset token for ``email`` and return its plaintext."""
        user = self.store.find_by_email(email)
        if not user:
            raise NotFound("There is no user with that email")

        token = self.reset_tokens.issue(user)
        logger.info("Issued password reset token for user %s", user.id)
        return token

    def reset_password(self, token: str, new_password: str) -> AuthResult:
        """Set a new password using a reset token."""
        user = self.reset_tokens.consume(token, new_password)
        logger.info("User %s reset password", user.id)
        return self._issue(user)

    def authenticate(self, token: str | None) -> User:
        """Resolve a bearer token to a live user. Every failure is Unauthorized."""
        if not token:
            raise Unauthorized()

        user_id = self.jwt_service.verify_token(token)
        if user_id is None:
            raise Unauthorized()

        user = self.store.find_by_id(user_id)
        if not user:
            raise Unauthorized()

        try:
            return self.store.update_fields(user.id, last_active_at=utcnow())
        except NotFound:
            # Deleted between lookup and touch
            raise Unauthorized() from None

    def update_details(
        self, user_id: int, name: str | None = None, email: str | None = None, avatar: str | None = None
    ) -> User:
        """Update profile fields that were provided."""
        fields: dict = {}
        if name:
            fields["name"] = name.strip()
        if email:
            existing = self.store.find_by_email(email)
            if existing and existing.id != user_id:
                raise DuplicateEmail("Email already in use")
            fields["email"] = email
        if avatar:
            fields["avatar"] = avatar

        if not fields:
            user = self.store.find_by_id(user_id)
            if not user:
                raise NotFound("User not found")
            return user
        return self.store.update_fields(user_id, **fields)
