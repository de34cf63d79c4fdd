"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, UploadFile

from notemind.config import Settings, get_settings
from notemind.dependencies import (
    clear_auth_cookie,
    get_auth_service,
    get_current_user,
    set_auth_cookie,
)
from notemind.models.user import User
from notemind.rate_limit import limiter
from notemind.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateDetailsRequest,
    UpdatePasswordRequest,
    UserResponse,
)
from notemind.services.auth import AuthResult, AuthService
from notemind.services.avatar import AvatarService

logger = logging.getLogger("notemind")

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def _token_response(result: AuthResult, response: Response, settings: Settings) -> AuthResponse:
    set_auth_cookie(response, result.token, settings)
    return AuthResponse(token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/register", response_model=AuthResponse, status_code=201)
@limiter.limit("5/minute")
def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Register a new user account."""
    result = auth_service.register(body.name, body.email, body.password)
    return _token_response(result, response, settings)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Authenticate and receive a JWT token."""
    result = auth_service.login(body.email, body.password)
    return _token_response(result, response, settings)


@router.get("/logout")
def logout(response: Response, user: User = Depends(get_current_user)) -> dict:
    """Clear the auth cookie. Issued tokens stay valid until they expire."""
    clear_auth_cookie(response)
    return {"detail": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)) -> UserResponse:
    """Get the current user's profile."""
    return UserResponse.model_validate(user)


@router.put("/details", response_model=UserResponse)
def update_details(
    body: UpdateDetailsRequest,
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Update name, email or avatar URL."""
    updated = auth_service.update_details(user.id, name=body.name, email=body.email, avatar=body.avatar)
    return UserResponse.model_validate(updated)


@router.put("/password", response_model=AuthResponse)
@limiter.limit("5/minute")
def update_password(
    request: Request,
    response: Response,
    body: UpdatePasswordRequest,
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Change password and receive a fresh token."""
    result = auth_service.change_password(user.id, body.current_password, body.new_password)
    return _token_response(result, response, settings)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
@limiter.limit("3/minute")
def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> ForgotPasswordResponse:
    """Issue a password reset token.

    There is no mailer yet: the link is logged, and outside production it is
    also returned in the response body.
    """
    token = auth_service.request_password_reset(body.email)

    base_url = str(request.base_url).rstrip("/")
    reset_url = f"{base_url}{router.prefix}/reset-password/{token}"
    logger.info("PASSWORD RESET: %s", reset_url)

    if settings.is_production:
        return ForgotPasswordResponse(message="Password reset token sent")
    return ForgotPasswordResponse(message="Password reset token sent", reset_token=token, reset_url=reset_url)


@router.put("/reset-password/{token}", response_model=AuthResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request,
    response: Response,
    token: str,
    body: ResetPasswordRequest,
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> AuthResponse:
    """Reset password using a valid token. Returns JWT for auto-login."""
    result = auth_service.reset_password(token, body.password)
    return _token_response(result, response, settings)


@router.post("/avatar", response_model=UserResponse)
@limiter.limit("10/minute")
async def upload_avatar(
    request: Request,
    file: UploadFile,
    user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> UserResponse:
    """Upload a profile picture."""
    service = AvatarService(settings)

    error = service.validate_upload_metadata(file.filename or "", file.content_type)
    if error:
        raise HTTPException(status_code=400, detail=error)

    try:
        avatar_url = await service.store_file(file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None

    updated = auth_service.update_details(user.id, avatar=avatar_url)
    return UserResponse.model_validate(updated)


@router.get("/verify")
def verify_token(token: str, auth_service: AuthService = Depends(get_auth_service)) -> dict:
    """Check a JWT token and return the user it belongs to."""
    user = auth_service.authenticate(token)
    return {"valid": True, "user_id": user.id, "email": user.email}
