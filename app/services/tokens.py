"""One-time token issuance for email verification and password reset."""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from app.config import get_settings

TOKEN_BYTES = 20


@dataclass(frozen=True)
class TemporaryToken:
    """A freshly issued one-time token.

    ``unhashed`` goes into the mailed link, ``hashed`` and ``expires_at`` are
    what gets stored on the user.
    """

    unhashed: str
    hashed: str
    expires_at: datetime


def hash_token(token: str) -> str:
    """Return the SHA-256 hex digest used to store and look up one-time tokens."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_temporary_token(expire_minutes: int | None = None) -> TemporaryToken:
    """Generate a random token, its hash and an absolute expiry."""
    if expire_minutes is None:
        expire_minutes = get_settings().TEMPORARY_TOKEN_EXPIRE_MINUTES
    unhashed = secrets.token_hex(TOKEN_BYTES)
    return TemporaryToken(
        unhashed=unhashed,
        hashed=hash_token(unhashed),
        expires_at=datetime.utcnow() + timedelta(minutes=expire_minutes),
    )


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """A token with no recorded expiry counts as expired."""
    if expires_at is None:
        return True
    return expires_at <= (now or datetime.utcnow())
