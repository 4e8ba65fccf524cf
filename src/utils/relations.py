# src/utils/relations.py
# Низкоуровневые выборки по user_relations. Без commit, без проверок существования.

from __future__ import annotations

from typing import List

from sqlalchemy import and_, or_, select, func
from sqlalchemy.orm import Session

from src.models.relation import RelationKind, UserRelation


def relation_exists(db: Session, user_id: int, target_id: int, kind: RelationKind) -> bool:
    return bool(db.scalar(
        select(func.count())
        .select_from(UserRelation)
        .where(
            UserRelation.user_id == user_id,
            UserRelation.target_id == target_id,
            UserRelation.kind == kind,
        )
    ))


def is_blocked(db: Session, a_id: int, b_id: int) -> bool:
    """
    Вражда блокирует в обе стороны, кто бы её ни объявил.
    """
    return bool(db.scalar(
        select(func.count())
        .select_from(UserRelation)
        .where(
            UserRelation.kind == RelationKind.enemy,
            or_(
                and_(UserRelation.user_id == a_id, UserRelation.target_id == b_id),
                and_(UserRelation.user_id == b_id, UserRelation.target_id == a_id),
            ),
        )
    ))


def outgoing_ids(db: Session, user_id: int, kind: RelationKind) -> List[int]:
    """Кого user отметил (идолы, симпатии, враги)."""
    return list(db.scalars(
        select(UserRelation.target_id)
        .where(UserRelation.user_id == user_id, UserRelation.kind == kind)
    ).all())


def incoming_ids(db: Session, target_id: int, kind: RelationKind) -> List[int]:
    """Кто отметил target (для idol — это фанаты)."""
    return list(db.scalars(
        select(UserRelation.user_id)
        .where(UserRelation.target_id == target_id, UserRelation.kind == kind)
    ).all())


def add_relation(db: Session, user_id: int, target_id: int, kind: RelationKind) -> UserRelation:
    rel = UserRelation(user_id=user_id, target_id=target_id, kind=kind)
    db.add(rel)
    db.flush()  # остаёмся в общей транзакции
    return rel
