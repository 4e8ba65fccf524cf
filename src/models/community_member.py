# src/models/community_member.py
# Участник сообщества + уникальность (community_id, user_id). Порядок вступления = id.

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from src.db import Base


class CommunityMember(Base):
    __tablename__ = "community_members"

    id = Column(Integer, primary_key=True, index=True)
    community_id = Column(Integer, ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_community_members_community_user"),
        Index("ix_community_members_user", "user_id", "community_id"),
    )

    community = relationship("Community")
    user = relationship("User")
