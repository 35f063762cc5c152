"""User model."""

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.chat_board import ChatBoard


class User(Base):
    """Application user and credential record."""

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    username = Column(String(128), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    is_email_verified = Column(Boolean, nullable=False, default=False)

    # Hashed one-time tokens; the cleartext only ever travels by mail
    email_verification_token = Column(String(128), nullable=True, index=True)
    email_verification_token_expires = Column(DateTime, nullable=True)
    forgot_password_token = Column(String(128), nullable=True, index=True)
    forgot_password_expiry = Column(DateTime, nullable=True)

    refresh_token = Column(String(1024), nullable=True)

    chat_board_id = Column(Integer, ForeignKey("chat_board.id"), nullable=True, unique=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)

    chat_board = relationship(ChatBoard, back_populates="user", uselist=False)
