# src/services/accounts.py
from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.models.user import User
from src.models.session import UserSession
from src.models.profile_attribute import ProfileAttribute
from src.models.friend import Friend
from src.models.friend_request import FriendRequest
from src.models.relation import UserRelation
from src.models.message import Message
from src.schemas.user import UserOut
from src.services.errors import ErrorCode, SocialError
from src.services.communities import drop_user_from_communities
from src.services.events import purge_events_for
from src.services.profile import get_attributes
from src.utils.transactions import commit
from src.utils.user import find_user, get_user_or_error

log = logging.getLogger(__name__)


def create_user(db: Session, login: str, password: str, name: str) -> User:
    """
    Регистрирует аккаунт. Порядок проверок: login -> password -> занятость login.
    """
    if login is None or not login.strip():
        raise SocialError(ErrorCode.INVALID_LOGIN)
    if password is None or not password.strip():
        raise SocialError(ErrorCode.INVALID_PASSWORD)
    if find_user(db, login):
        raise SocialError(ErrorCode.LOGIN_TAKEN)

    user = User(login=login, password=password, name=name or "")
    db.add(user)
    commit(db)
    db.refresh(user)
    return user


def user_exists(db: Session, login: str) -> bool:
    return find_user(db, login) is not None


def get_user(db: Session, login: str) -> User:
    return get_user_or_error(db, login)


def describe_user(db: Session, login: str) -> UserOut:
    user = get_user_or_error(db, login)
    return UserOut(
        id=user.id,
        login=user.login,
        name=user.name,
        attributes=get_attributes(db, user.id),
        created_at=user.created_at,
    )


def remove_user(db: Session, login: str) -> None:
    """
    Удаляет аккаунт и вычищает login из всех остальных записей:
    дружбы, заявки, идолы/фанаты, симпатии, враги, сообщения за его авторством,
    сессии, сообщества (свои удаляются, из чужих выходит), события.
    Всё в одной транзакции, снаружи не видно частично очищенного состояния.
    """
    user = get_user_or_error(db, login)
    uid = user.id

    db.query(UserSession).filter(UserSession.user_id == uid).delete()
    drop_user_from_communities(db, uid)

    db.query(Friend).filter(
        or_(Friend.user_min == uid, Friend.user_max == uid)
    ).delete()
    db.query(FriendRequest).filter(
        or_(FriendRequest.requester_id == uid, FriendRequest.target_id == uid)
    ).delete()
    db.query(UserRelation).filter(
        or_(UserRelation.user_id == uid, UserRelation.target_id == uid)
    ).delete()
    purged = db.query(Message).filter(
        or_(Message.sender_id == uid, Message.recipient_id == uid)
    ).delete()
    db.query(ProfileAttribute).filter(ProfileAttribute.user_id == uid).delete()
    purge_events_for(db, uid)

    db.delete(user)
    commit(db)
    log.info("user %s removed (messages purged: %s)", login, purged)
