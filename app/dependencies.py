"""Authentication dependencies and session cookie helpers."""

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.services.auth import SessionTokens, get_auth_service
from app.services.jwt import get_jwt_service

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user from a Bearer access token or cookie. Raises 401 if invalid."""
    token: str | None = None

    # Check Authorization header first
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header[7:]

    # Fall back to cookie
    if not token:
        token = request.cookies.get(ACCESS_TOKEN_COOKIE)

    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized request")

    payload = get_jwt_service().decode_access_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid access token")

    user = get_auth_service().get_user(db, int(payload["sub"]))
    if not user:
        raise HTTPException(status_code=401, detail="Invalid access token")
    return user


def _cookie_options() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.COOKIE_SECURE,
        "samesite": settings.COOKIE_SAMESITE.lower(),
        "domain": settings.COOKIE_DOMAIN,
        "path": "/",
    }


def set_session_cookies(response: Response, tokens: SessionTokens) -> None:
    """Set the access and refresh token cookies."""
    settings = get_settings()
    options = _cookie_options()
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **options,
    )
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        **options,
    )


def clear_session_cookies(response: Response) -> None:
    """Clear both session cookies."""
    options = _cookie_options()
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE, **options)
    response.delete_cookie(key=REFRESH_TOKEN_COOKIE, **options)
