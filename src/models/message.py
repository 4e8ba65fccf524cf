# src/models/message.py

from __future__ import annotations

import enum
from sqlalchemy import Column, Integer, String, Text, ForeignKey, Enum, DateTime, Index, func
from sqlalchemy.orm import relationship
from src.db import Base


class MessageKind(enum.Enum):
    note = "note"            # личный «recado» (и системные уведомления)
    community = "community"  # рассылка сообщества


class Message(Base):
    """
    Элемент FIFO-очереди получателя. Очередь у каждого вида своя:
    read_note читает только note, read_message — только community.
    sender_id = NULL — системное сообщение.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    kind = Column(Enum(MessageKind, name="message_kind"), nullable=False)
    community_name = Column(String, nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())

    __table_args__ = (
        Index("ix_messages_recipient_kind", "recipient_id", "kind", "id"),
    )

    recipient = relationship("User", foreign_keys=[recipient_id])
    sender = relationship("User", foreign_keys=[sender_id])

    def __repr__(self):
        return f"<Message(id={self.id}, kind={self.kind.value}, recipient_id={self.recipient_id}, sender_id={self.sender_id})>"
