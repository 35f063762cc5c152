"""Pydantic schemas for authentication endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Request bodies reject unknown fields and accept camelCase from the client
_REQUEST_CONFIG = ConfigDict(extra="forbid", populate_by_name=True)


class RegisterRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    email: str = Field(min_length=3, max_length=256, pattern=r"^[^@\s]+@[^@\s]+$")
    # No "@" so a username can never be mistaken for an email at login
    username: str = Field(min_length=1, max_length=128, pattern=r"^[^@\s]+$")
    password: str = Field(min_length=1)
    confirm_password: str | None = Field(default=None, alias="confirmPassword")

    @field_validator("email", "username", mode="before")
    @classmethod
    def strip_identity(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginCredentials(BaseModel):
    model_config = _REQUEST_CONFIG

    # Holds either an email address or a username
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    user_data: LoginCredentials | None = Field(default=None, alias="userData")


class ForgotPasswordRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    email: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    new_password: str = Field(min_length=1, alias="newPassword")


class RefreshTokenRequest(BaseModel):
    model_config = _REQUEST_CONFIG

    refresh_token: str | None = Field(default=None, alias="refreshToken")


class UserResponse(BaseModel):
    """Sanitized user record: no password hash, session or one-time tokens."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    email: str
    username: str
    is_email_verified: bool
    chat_board_id: int | None
    created_at: datetime
    last_login_at: datetime | None = None


class ApiResponse(BaseModel):
    """Envelope for every successful response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int
    data: Any = None
    message: str = "Success"
    success: bool = True
