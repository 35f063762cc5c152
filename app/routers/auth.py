"""Authentication API endpoints."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import (
    REFRESH_TOKEN_COOKIE,
    clear_session_cookies,
    get_current_user,
    set_session_cookies,
)
from app.exceptions import ValidationError
from app.models.user import User
from app.rate_limit import limiter
from app.schemas.auth import (
    ApiResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from app.services.auth import get_auth_service

logger = logging.getLogger("finance_vision")

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def sanitize(user: User) -> dict:
    """Serialize a user without credential or token fields."""
    return UserResponse.model_validate(user).model_dump(by_alias=True, mode="json")


@router.post("/register", response_model=ApiResponse, status_code=201)
@limiter.limit("5/minute")
def register(request: Request, body: RegisterRequest, db: Session = Depends(get_db)) -> ApiResponse:
    """Register a new account and send the verification email."""
    user = get_auth_service().register(db, body.email, body.username, body.password, body.confirm_password)
    return ApiResponse(
        status_code=201,
        data={"user": sanitize(user)},
        message="User registered successfully and verification email has been sent on your email.",
    )


@router.get("/verify-email", response_model=ApiResponse, include_in_schema=False)
def verify_email_missing_token() -> ApiResponse:
    """Verification link without a token."""
    raise ValidationError("Email verification token is missing")


@router.get("/verify-email/{token}", response_model=ApiResponse)
def verify_email(token: str, db: Session = Depends(get_db)) -> ApiResponse:
    """Mark the email verified using the token from the verification link."""
    get_auth_service().verify_email(db, token)
    return ApiResponse(status_code=200, data={"isEmailVerified": True}, message="Email verified successfully")


@router.post("/login", response_model=ApiResponse)
@limiter.limit("10/minute")
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)) -> ApiResponse:
    """Authenticate with email or username and start a session."""
    if body.user_data is None:
        raise ValidationError("User data is required")

    user, tokens = get_auth_service().login(db, body.user_data.email, body.user_data.password)
    set_session_cookies(response, tokens)
    return ApiResponse(
        status_code=200,
        data={"user": sanitize(user), "accessToken": tokens.access_token},
        message="User logged in successfully",
    )


@router.post("/logout", response_model=ApiResponse)
def logout(
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApiResponse:
    """End the session: drop the stored refresh token and clear cookies."""
    get_auth_service().logout(db, user.id)
    clear_session_cookies(response)
    return ApiResponse(status_code=200, data={}, message="User logged out successfully")


@router.get("/me", response_model=ApiResponse)
def current_user(user: User = Depends(get_current_user)) -> ApiResponse:
    """Return the authenticated user."""
    return ApiResponse(status_code=200, data=sanitize(user), message="Current user fetched successfully")


@router.post("/refresh-token", response_model=ApiResponse)
@limiter.limit("20/minute")
def refresh_token(
    request: Request,
    response: Response,
    body: RefreshTokenRequest | None = None,
    db: Session = Depends(get_db),
) -> ApiResponse:
    """Rotate the session using the refresh token from the cookie or body."""
    incoming = request.cookies.get(REFRESH_TOKEN_COOKIE) or (body.refresh_token if body else None)
    _, tokens = get_auth_service().refresh_session(db, incoming)
    set_session_cookies(response, tokens)
    return ApiResponse(
        status_code=200,
        data={"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        message="Access token refreshed",
    )


@router.post("/forgot-password", response_model=ApiResponse)
@limiter.limit("3/minute")
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)) -> ApiResponse:
    """Mail a password reset link to the account holder."""
    get_auth_service().request_password_reset(db, body.email)
    return ApiResponse(status_code=200, data={}, message="Password reset mail has been sent on your email")


@router.post("/reset-password/{token}", response_model=ApiResponse)
@limiter.limit("5/minute")
def reset_password(
    request: Request, token: str, body: ResetPasswordRequest, db: Session = Depends(get_db)
) -> ApiResponse:
    """Set a new password using the token from the reset link."""
    get_auth_service().reset_password(db, token, body.new_password)
    return ApiResponse(status_code=200, data={}, message="Password reset successfully")
