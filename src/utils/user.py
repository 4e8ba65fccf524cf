# src/utils/user.py
# ОБЩИЕ ХЕЛПЕРЫ ДЛЯ РАБОТЫ С ДИРЕКТОРИЕЙ ПОЛЬЗОВАТЕЛЕЙ.

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from src.models.user import User
from src.services.errors import ErrorCode, SocialError


def get_display_name(user: User) -> str:
    """
    Отображаемое имя пользователя:
    1. Если есть name — его.
    2. Иначе login.
    """
    name = (user.name or "").strip()
    return name or user.login


def find_user(db: Session, login: Optional[str]) -> Optional[User]:
    """Пустой/пробельный login никогда не найден."""
    if login is None or not login.strip():
        return None
    return db.query(User).filter(User.login == login).first()


def get_user_or_error(db: Session, login: Optional[str]) -> User:
    user = find_user(db, login)
    if not user:
        raise SocialError(ErrorCode.USER_NOT_FOUND)
    return user


def logins_by_id(db: Session, ids: Iterable[int]) -> Dict[int, str]:
    ids = list(ids)
    if not ids:
        return {}
    rows = db.query(User.id, User.login).filter(User.id.in_(ids)).all()
    return {uid: login for uid, login in rows}


def sorted_logins(db: Session, ids: Iterable[int]) -> List[str]:
    """Логины по id, в алфавитном порядке (регистрозависимо)."""
    return sorted(logins_by_id(db, ids).values())


def render_logins(logins: Iterable[str]) -> str:
    """Форма отображения списка: {a,b,c} или {}."""
    return "{" + ",".join(logins) + "}"
