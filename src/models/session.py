# src/models/session.py

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from src.db import Base

class UserSession(Base):
    """
    Открытая сессия: непрозрачный токен -> пользователь.
    У одного пользователя максимум одна сессия (новая закрывает старую).
    """
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())

    user = relationship("User", foreign_keys=[user_id])

    def __repr__(self):
        return f"<UserSession(id={self.id}, user_id={self.user_id})>"
