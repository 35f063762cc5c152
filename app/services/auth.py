"""Account and credential service.

Registration, email verification, login, logout, refresh-token rotation and
password reset. Every flow raises an ``ApiError`` subclass on failure; the
caller translates it into an HTTP response.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

import bcrypt
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.exceptions import AuthError, ConflictError, InternalError, NotFoundError, ValidationError
from app.models.chat_board import ChatBoard
from app.models.user import User
from app.services.jwt import get_jwt_service
from app.services.mailer import get_mailer
from app.services.tokens import generate_temporary_token, hash_token, is_expired

logger = logging.getLogger("finance_vision")


@dataclass
class SessionTokens:
    """Access and refresh token pair issued for one session."""

    access_token: str
    refresh_token: str


# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


class AuthService:
    """Handles the account and session token lifecycle."""

    def get_user(self, db: Session, user_id: int) -> User | None:
        """Get a user by ID."""
        return db.query(User).filter(User.id == user_id).first()

    def find_by_email_or_username(self, db: Session, email: str | None, username: str | None = None) -> User | None:
        """Find a user whose email (case-insensitive) or username matches either value.

        Both values are compared against both columns, so an email can never be
        taken as someone else's username or the other way round.
        """
        values = [v.strip() for v in (email, username) if v and v.strip()]
        if not values:
            return None
        conditions = []
        for value in values:
            conditions.append(func.lower(User.email) == value.lower())
            conditions.append(User.username == value)
        return db.query(User).filter(or_(*conditions)).first()

    def find_by_identifier(self, db: Session, identifier: str) -> User | None:
        """Resolve a login identifier: an email address if it contains '@', else a username."""
        identifier = identifier.strip()
        if "@" in identifier:
            return db.query(User).filter(func.lower(User.email) == identifier.lower()).first()
        return db.query(User).filter(User.username == identifier).first()

    def register(
        self, db: Session, email: str, username: str, password: str, confirm_password: str | None = None
    ) -> User:
        """Create a user and its chat board, then mail the verification link.

        Nothing is committed unless the mail was handed off successfully.
        """
        if confirm_password is not None and confirm_password != password:
            raise ValidationError("Passwords do not match")

        email = email.strip().lower()
        username = username.strip()
        if not email or not username:
            raise ValidationError("Email and username are required")
        if "@" in username:
            raise ValidationError("Username must not contain '@'")
        if self.find_by_email_or_username(db, email, username):
            raise ConflictError("User already exists")

        settings = get_settings()
        try:
            user = User(
                email=email,
                username=username,
                password_hash=hash_password(password),
                is_email_verified=False,
            )
            db.add(user)
            db.flush()

            chat_board = ChatBoard()
            db.add(chat_board)
            db.flush()
            user.chat_board_id = chat_board.id

            token = generate_temporary_token()
            user.email_verification_token = token.hashed
            user.email_verification_token_expires = token.expires_at
            db.flush()

            verification_url = f"{settings.CLIENT_URL}/verify-email/{token.unhashed}"
            get_mailer().send_email(
                email=user.email,
                subject="Email Verification",
                text=f"Please verify your email by clicking on the link below: {verification_url}",
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("User already exists") from None
        except Exception:
            db.rollback()
            raise

        created = self.get_user(db, user.id)
        if not created:
            raise InternalError("Something went wrong while registering the user")

        logger.info("Registered user %s (id=%d)", created.username, created.id)
        return created

    def verify_email(self, db: Session, token: str | None) -> User:
        """Consume an email verification token."""
        if not token or not token.strip():
            raise ValidationError("Email verification token is missing")

        user = db.query(User).filter(User.email_verification_token == hash_token(token.strip())).first()
        if not user:
            raise ValidationError("Invalid or expired email verification token")

        if is_expired(user.email_verification_token_expires):
            user.email_verification_token = None
            user.email_verification_token_expires = None
            db.commit()
            raise ValidationError("Invalid or expired email verification token")

        user.email_verification_token = None
        user.email_verification_token_expires = None
        user.is_email_verified = True
        db.commit()
        db.refresh(user)

        logger.info("Verified email for user id=%d", user.id)
        return user

    def authenticate(self, db: Session, identifier: str | None, password: str | None) -> User:
        """Check credentials. ``identifier`` is an email address or a username."""
        if not identifier or not identifier.strip():
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")

        user = self.find_by_identifier(db, identifier)
        if not user:
            raise NotFoundError("User does not exist")

        if not verify_password(password, user.password_hash):
            raise AuthError("Invalid user credentials")

        return user

    def issue_session_tokens(self, db: Session, user: User) -> SessionTokens:
        """Issue an access/refresh pair; the refresh token replaces any previous one."""
        jwt_service = get_jwt_service()
        tokens = SessionTokens(
            access_token=jwt_service.create_access_token(user),
            refresh_token=jwt_service.create_refresh_token(user),
        )
        user.refresh_token = tokens.refresh_token
        user.last_login_at = datetime.utcnow()
        db.commit()
        db.refresh(user)
        return tokens

    def login(self, db: Session, identifier: str | None, password: str | None) -> tuple[User, SessionTokens]:
        """Authenticate and start a new session."""
        user = self.authenticate(db, identifier, password)
        tokens = self.issue_session_tokens(db, user)
        logger.info("User id=%d logged in", user.id)
        return user, tokens

    def logout(self, db: Session, user_id: int) -> None:
        """Drop the stored refresh token with a single UPDATE."""
        db.query(User).filter(User.id == user_id).update({User.refresh_token: None}, synchronize_session="fetch")
        db.commit()
        logger.info("User id=%d logged out", user_id)

    def refresh_session(self, db: Session, refresh_token: str | None) -> tuple[User, SessionTokens]:
        """Exchange the current refresh token for a new token pair."""
        if not refresh_token:
            raise AuthError("Unauthorized request")

        payload = get_jwt_service().decode_refresh_token(refresh_token)
        if not payload:
            raise AuthError("Invalid refresh token")

        user = self.get_user(db, int(payload["sub"]))
        if not user:
            raise AuthError("Invalid refresh token")

        if user.refresh_token != refresh_token:
            raise AuthError("Refresh token is expired or used")

        return user, self.issue_session_tokens(db, user)

    def request_password_reset(self, db: Session, email: str) -> User:
        """Store a reset token for the user and mail them the reset link."""
        user = db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()
        if not user:
            raise NotFoundError("User does not exist")

        settings = get_settings()
        token = generate_temporary_token()
        try:
            user.forgot_password_token = token.hashed
            user.forgot_password_expiry = token.expires_at
            db.flush()

            reset_url = f"{settings.CLIENT_URL}/reset-password/{token.unhashed}"
            get_mailer().send_email(
                email=user.email,
                subject="Reset Password",
                text=(
                    f"If you have sent this reset password request, open the link below: {reset_url}\n"
                    "If this request is not from you, you do not have to do anything."
                ),
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info("Password reset requested for user id=%d", user.id)
        return user

    def reset_password(self, db: Session, token: str, new_password: str) -> User:
        """Replace the password of the user holding a live reset token."""
        user = (
            db.query(User)
            .filter(
                User.forgot_password_token == hash_token(token.strip()),
                User.forgot_password_expiry > datetime.utcnow(),
            )
            .first()
        )
        if not user:
            raise ValidationError("Token is invalid or expired")

        user.password_hash = hash_password(new_password)
        user.forgot_password_token = None
        user.forgot_password_expiry = None
        user.refresh_token = None
        db.commit()
        db.refresh(user)

        logger.info("Password reset for user id=%d", user.id)
        return user


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
