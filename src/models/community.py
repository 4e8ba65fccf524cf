# src/models/community.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: Community (SQLAlchemy)
# -----------------------------------------------------------------------------

from __future__ import annotations

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship

from src.db import Base


class Community(Base):
    __tablename__ = "communities"

    id = Column(Integer, primary_key=True, index=True)
    # имя уникально и регистрозависимо
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=False, default="")

    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner = relationship("User")

    created_at = Column(DateTime, nullable=False, default=func.now())

    def __repr__(self) -> str:
        return f"<Community id={self.id} name={self.name!r} owner={self.owner_id}>"
