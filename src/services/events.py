# src/services/events.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.models.event import Event
from src.schemas.event import EventOut
from src.utils.user import get_user_or_error

# Типы событий (используй в сервисах)
FRIEND_REQUEST_SENT = "friend_request_sent"
FRIENDSHIP_CREATED = "friendship_created"

IDOL_ADDED = "idol_added"
CRUSH_ADDED = "crush_added"
CRUSH_MATCHED = "crush_matched"
ENEMY_ADDED = "enemy_added"

COMMUNITY_CREATED = "community_created"
MEMBER_ADDED = "member_added"


def log_event(
    db: Session,
    *,
    type: str,
    actor_id: int,
    target_user_id: Optional[int] = None,
    community_id: Optional[int] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Event:
    """
    Единая точка записи событий. Вызывается в той же транзакции, что и бизнес-операция.
    Не делает commit.
    """
    ev = Event(
        type=type,
        actor_id=actor_id,
        target_user_id=target_user_id,
        community_id=community_id,
        data=(data or {}),
    )
    db.add(ev)
    return ev


def list_events_for(db: Session, user_id: int, limit: int = 50) -> List[Event]:
    """
    Лента пользователя: события, где он актор или цель. Новые — первыми.
    """
    return (
        db.query(Event)
        .filter(or_(Event.actor_id == user_id, Event.target_user_id == user_id))
        .order_by(Event.id.desc())
        .limit(limit)
        .all()
    )


def purge_events_for(db: Session, user_id: int) -> int:
    """Удаляет все события, где пользователь актор или цель. Без commit."""
    return (
        db.query(Event)
        .filter(or_(Event.actor_id == user_id, Event.target_user_id == user_id))
        .delete()
    )


def list_user_events(db: Session, login: str, limit: int = 50) -> List[EventOut]:
    user = get_user_or_error(db, login)
    return [EventOut.model_validate(e) for e in list_events_for(db, user.id, limit)]
