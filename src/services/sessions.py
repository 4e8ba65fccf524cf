# src/services/sessions.py
from __future__ import annotations

import secrets
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from src.models.session import UserSession
from src.services.errors import ErrorCode, SocialError
from src.utils.transactions import commit
from src.utils.user import find_user


def open_session(db: Session, login: str, password: str) -> str:
    """
    Открывает сессию и возвращает токен. Предыдущая сессия этого login закрывается.
    """
    user = find_user(db, login)
    if user is None or password is None or not secrets.compare_digest(
        user.password.encode("utf-8"), password.encode("utf-8")
    ):
        raise SocialError(ErrorCode.INVALID_CREDENTIALS)

    db.query(UserSession).filter(UserSession.user_id == user.id).delete()
    token = str(uuid.uuid4())
    db.add(UserSession(token=token, user_id=user.id))
    commit(db)
    return token


def resolve_session(db: Session, token: Optional[str]) -> str:
    """
    Токен -> login действующего пользователя.
    Пустой токен — USER_NOT_FOUND, неизвестный — INVALID_SESSION.
    """
    if token is None or not token.strip():
        raise SocialError(ErrorCode.USER_NOT_FOUND)
    row = db.query(UserSession).filter(UserSession.token == token).first()
    if row is None:
        raise SocialError(ErrorCode.INVALID_SESSION)
    return row.user.login


def close_session(db: Session, token: str) -> bool:
    """Идемпотентно: True, если сессия была закрыта."""
    deleted = db.query(UserSession).filter(UserSession.token == token).delete()
    commit(db)
    return bool(deleted)
