"""Request-scoped dependencies: stores, services and the session check."""

from collections.abc import Callable

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from notemind.config import Settings, get_settings
from notemind.database import get_db
from notemind.exceptions import Forbidden
from notemind.models.user import User
from notemind.services.ai import AIService
from notemind.services.auth import AuthService
from notemind.services.note import NoteService
from notemind.services.tag import TagService
from notemind.stores import CredentialStore, SqlCredentialStore

AUTH_COOKIE_NAME = "jwt"


def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return SqlCredentialStore(db)


def get_auth_service(
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService.from_settings(store, settings)


def get_note_service(db: Session = Depends(get_db)) -> NoteService:
    return NoteService(db)


def get_tag_service(db: Session = Depends(get_db)) -> TagService:
    return TagService(db)


def get_ai_service(settings: Settings = Depends(get_settings)) -> AIService:
    return AIService(settings)


def extract_token(request: Request) -> str | None:
    """Bearer header wins over the cookie."""
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
        if token:
            return token

    return request.cookies.get(AUTH_COOKIE_NAME) or None


def get_current_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Extract, verify and load the user behind the request. Raises Unauthorized."""
    user = auth_service.authenticate(extract_token(request))
    request.state.user = user
    return user


def require_role(*roles: str) -> Callable[..., User]:
    """Dependency factory gating a route on the current user's role."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise Forbidden(f"User role {user.role} is not authorized to access this route")
        return user

    return checker


def set_auth_cookie(response: Response, token: str, settings: Settings) -> None:
    """Set the authentication cookie for the token's lifetime."""
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
        max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
    )


def clear_auth_cookie(response: Response) -> None:
    """Clear the authentication cookie."""
    response.delete_cookie(key=AUTH_COOKIE_NAME)
