"""JWT session token service."""

import uuid
from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import get_settings
from app.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class JWTService:
    """Creates and validates access and refresh tokens.

    Access and refresh tokens are signed with different secrets and carry a
    ``type`` claim, so one can never be presented in place of the other.
    """

    def __init__(self) -> None:
        settings = get_settings()
        self.access_secret = settings.ACCESS_TOKEN_SECRET
        self.refresh_secret = settings.REFRESH_TOKEN_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.access_expire = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_expire = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def create_access_token(self, user: User) -> str:
        """Create a short-lived access token for the given user."""
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "username": user.username,
            "type": ACCESS_TOKEN_TYPE,
            "exp": datetime.utcnow() + self.access_expire,
        }
        return jwt.encode(payload, self.access_secret, algorithm=self.algorithm)

    def create_refresh_token(self, user: User) -> str:
        """Create a long-lived refresh token. ``jti`` makes every issuance unique."""
        payload = {
            "sub": str(user.id),
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
            "exp": datetime.utcnow() + self.refresh_expire,
        }
        return jwt.encode(payload, self.refresh_secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate an access token. Returns None if invalid."""
        return self._decode(token, self.access_secret, ACCESS_TOKEN_TYPE)

    def decode_refresh_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a refresh token. Returns None if invalid."""
        return self._decode(token, self.refresh_secret, REFRESH_TOKEN_TYPE)

    def _decode(self, token: str, secret: str, token_type: str) -> dict[str, Any] | None:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != token_type or "sub" not in payload:
            return None
        return payload


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
