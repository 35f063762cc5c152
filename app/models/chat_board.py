"""Chat board model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import relationship

from app.database import Base


class ChatBoard(Base):
    """Conversation record owned 1:1 by a user, created at registration."""

    __tablename__ = "chat_board"

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="chat_board", uselist=False)
