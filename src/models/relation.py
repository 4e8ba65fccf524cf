# src/models/relation.py
# -----------------------------------------------------------------------------
# МОДЕЛЬ: UserRelation — односторонние отношения (идол, симпатия, враг)
# -----------------------------------------------------------------------------

from __future__ import annotations

import enum
from sqlalchemy import (
    Column,
    Integer,
    ForeignKey,
    Enum,
    DateTime,
    UniqueConstraint,
    CheckConstraint,
    Index,
    func,
)
from sqlalchemy.orm import relationship

from src.db import Base


class RelationKind(enum.Enum):
    idol = "idol"      # user восхищается target; обратная сторона — фанаты target
    crush = "crush"    # односторонняя симпатия, без зеркального набора
    enemy = "enemy"    # объявленная вражда; блокирует в обе стороны


class UserRelation(Base):
    """
    Одна строка на (user, target, kind). Фанаты не хранятся отдельно:
    fans(B) = все user с (user -> B, idol), так что зеркало idols/fans
    не может рассинхронизироваться.
    """
    __tablename__ = "user_relations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    kind = Column(Enum(RelationKind, name="relation_kind"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=func.now())

    __table_args__ = (
        UniqueConstraint("user_id", "target_id", "kind", name="uq_user_relations_triple"),
        CheckConstraint("user_id <> target_id", name="ck_user_relations_not_self"),
        Index("ix_user_relations_user_kind", "user_id", "kind"),
        Index("ix_user_relations_target_kind", "target_id", "kind"),
    )

    user = relationship("User", foreign_keys=[user_id])
    target = relationship("User", foreign_keys=[target_id])

    def __repr__(self) -> str:
        return f"<UserRelation {self.kind.value} user={self.user_id} target={self.target_id}>"
