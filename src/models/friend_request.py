# src/models/friend_request.py

from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint, CheckConstraint, func
from sqlalchemy.orm import relationship
from src.db import Base

class FriendRequest(Base):
    """
    Ожидающая заявка в друзья requester -> target.
    Порядок поступления = порядок id (autoincrement).
    """
    __tablename__ = "friend_requests"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint("requester_id", "target_id", name="uq_friend_requests_pair"),
        CheckConstraint("requester_id <> target_id", name="ck_friend_requests_not_self"),
    )

    requester = relationship("User", foreign_keys=[requester_id])
    target = relationship("User", foreign_keys=[target_id])

    def __repr__(self):
        return f"<FriendRequest(id={self.id}, requester_id={self.requester_id}, target_id={self.target_id})>"
