# src/services/profile.py
from __future__ import annotations

from typing import Dict, Optional

from sqlalchemy.orm import Session

from src.models.profile_attribute import ProfileAttribute
from src.services.errors import ErrorCode, SocialError
from src.utils.transactions import commit
from src.utils.user import get_user_or_error

# Атрибуты, которые читаются из самой записи пользователя
NAME_ATTRIBUTES = {"nome", "name"}


def _normalize_key(attribute: Optional[str]) -> str:
    if attribute is None or not attribute.strip():
        raise SocialError(ErrorCode.ATTRIBUTE_NOT_SET)
    return attribute.lower()


def edit_profile(db: Session, login: str, attribute: str, value: str) -> None:
    """
    Создаёт или перезаписывает атрибут профиля. Ключ регистронезависимый.
    """
    key = _normalize_key(attribute)
    user = get_user_or_error(db, login)

    row = (
        db.query(ProfileAttribute)
        .filter(ProfileAttribute.user_id == user.id, ProfileAttribute.key == key)
        .first()
    )
    if row:
        row.value = value or ""
    else:
        db.add(ProfileAttribute(user_id=user.id, key=key, value=value or ""))
    commit(db)


def get_attribute(db: Session, login: str, attribute: str) -> str:
    user = get_user_or_error(db, login)
    key = _normalize_key(attribute)
    if key in NAME_ATTRIBUTES:
        return user.name

    row = (
        db.query(ProfileAttribute)
        .filter(ProfileAttribute.user_id == user.id, ProfileAttribute.key == key)
        .first()
    )
    if row is None or not row.value:
        raise SocialError(ErrorCode.ATTRIBUTE_NOT_SET)
    return row.value


def get_attributes(db: Session, user_id: int) -> Dict[str, str]:
    rows = (
        db.query(ProfileAttribute)
        .filter(ProfileAttribute.user_id == user_id)
        .order_by(ProfileAttribute.key)
        .all()
    )
    return {r.key: r.value for r in rows}
