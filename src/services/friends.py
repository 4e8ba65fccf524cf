# src/services/friends.py
# Протокол дружбы: NONE -> PENDING -> FRIENDS (симметрично) или обратно в NONE при отказе.
from __future__ import annotations

import enum
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from src.models.friend import Friend
from src.models.friend_request import FriendRequest
from src.models.user import User
from src.services.errors import ErrorCode, SocialError
from src.services.events import log_event, FRIEND_REQUEST_SENT, FRIENDSHIP_CREATED
from src.utils.relations import is_blocked
from src.utils.transactions import commit
from src.utils.user import find_user, get_display_name, get_user_or_error, sorted_logins


class FriendRequestOutcome(enum.Enum):
    requested = "requested"  # заявка поставлена в очередь цели
    accepted = "accepted"    # встречная заявка: дружба создана сразу


def _sorted_pair(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def _friend_link(db: Session, a: int, b: int) -> Optional[Friend]:
    umin, umax = _sorted_pair(a, b)
    return (
        db.query(Friend)
        .filter(Friend.user_min == umin, Friend.user_max == umax)
        .first()
    )


def _pending(db: Session, requester_id: int, target_id: int) -> Optional[FriendRequest]:
    return (
        db.query(FriendRequest)
        .filter(FriendRequest.requester_id == requester_id, FriendRequest.target_id == target_id)
        .first()
    )


def ensure_friendship(db: Session, accepter: User, requester: User) -> Friend:
    """
    Гарантирует дружбу между парой. Если её не было — создаёт запись
    и логирует FRIENDSHIP_CREATED. Не делает commit.
    """
    link = _friend_link(db, accepter.id, requester.id)
    if link:
        return link

    a, b = _sorted_pair(accepter.id, requester.id)
    link = Friend(user_min=a, user_max=b)
    db.add(link)
    db.flush()  # остаёмся в общей транзакции

    log_event(
        db,
        type=FRIENDSHIP_CREATED,
        actor_id=accepter.id,
        target_user_id=requester.id,
    )
    return link


def _accept(db: Session, request: FriendRequest, accepter: User, requester: User) -> None:
    db.delete(request)
    ensure_friendship(db, accepter, requester)


def request_friendship(db: Session, acting_login: str, target_login: str) -> FriendRequestOutcome:
    """
    Заявка в друзья от acting_login к target_login.

    Порядок проверок важен (при нескольких нарушениях срабатывает первое):
      1) существование цели, затем действующего пользователя;
      2) нельзя дружить с собой;
      3) вражда в любую сторону;
      4) уже друзья;
      5) заявка уже ждёт у цели;
      6) у acting уже есть встречная заявка от цели — это согласие, дружба сразу;
      7) иначе — новая заявка в конец очереди цели.
    """
    target = find_user(db, target_login)
    if not target:
        raise SocialError(ErrorCode.USER_NOT_FOUND)
    acting = get_user_or_error(db, acting_login)

    if acting.id == target.id:
        raise SocialError(ErrorCode.SELF_FRIENDSHIP)

    if is_blocked(db, acting.id, target.id):
        raise SocialError(ErrorCode.ENMITY_BLOCK, name=get_display_name(target))

    if _friend_link(db, acting.id, target.id):
        raise SocialError(ErrorCode.ALREADY_FRIENDS)

    if _pending(db, acting.id, target.id):
        raise SocialError(ErrorCode.REQUEST_ALREADY_PENDING)

    counter = _pending(db, target.id, acting.id)
    if counter:
        _accept(db, counter, accepter=acting, requester=target)
        commit(db)
        return FriendRequestOutcome.accepted

    db.add(FriendRequest(requester_id=acting.id, target_id=target.id))
    log_event(db, type=FRIEND_REQUEST_SENT, actor_id=acting.id, target_user_id=target.id)
    commit(db)
    return FriendRequestOutcome.requested


def accept_request(db: Session, accepter_login: str, requester_login: str) -> None:
    """
    Принять заявку requester -> accepter. Нет любого из пользователей
    или нет самой заявки — USER_NOT_FOUND.
    """
    accepter = get_user_or_error(db, accepter_login)
    requester = get_user_or_error(db, requester_login)

    request = _pending(db, requester.id, accepter.id)
    if not request:
        raise SocialError(ErrorCode.USER_NOT_FOUND)

    _accept(db, request, accepter=accepter, requester=requester)
    commit(db)


def reject_request(db: Session, rejecter_login: str, requester_login: str) -> bool:
    """
    Отклонить заявку. Если заявки нет — ничего не делаем (идемпотентно),
    уведомлений не шлём. Возвращает True, если заявка была удалена.
    """
    rejecter = get_user_or_error(db, rejecter_login)
    requester = find_user(db, requester_login)
    if not requester:
        return False

    request = _pending(db, requester.id, rejecter.id)
    if not request:
        return False

    db.delete(request)
    commit(db)
    return True


# =========================
# ЗАПРОСЫ
# =========================

def is_friend(db: Session, login: str, other_login: str) -> bool:
    """Односторонняя проверка: есть ли other в друзьях у login."""
    user = get_user_or_error(db, login)
    other = find_user(db, other_login)
    if not other:
        return False
    return _friend_link(db, user.id, other.id) is not None


def is_mutual_friend(db: Session, login: str, other_login: str) -> bool:
    """Проверка в обе стороны; оба пользователя обязаны существовать."""
    user = get_user_or_error(db, login)
    other = get_user_or_error(db, other_login)
    return is_friend(db, user.login, other.login) and is_friend(db, other.login, user.login)


def list_friends(db: Session, login: str) -> List[str]:
    """Друзья пользователя в алфавитном порядке."""
    user = get_user_or_error(db, login)
    links = (
        db.query(Friend)
        .filter(or_(Friend.user_min == user.id, Friend.user_max == user.id))
        .all()
    )
    other_ids = [l.user_max if l.user_min == user.id else l.user_min for l in links]
    return sorted_logins(db, other_ids)


def list_pending_requests(db: Session, login: str) -> List[str]:
    """Входящие заявки в порядке поступления."""
    user = get_user_or_error(db, login)
    rows = (
        db.query(User.login)
        .join(FriendRequest, FriendRequest.requester_id == User.id)
        .filter(FriendRequest.target_id == user.id)
        .order_by(FriendRequest.id.asc())
        .all()
    )
    return [r.login for r in rows]


def has_pending_request(db: Session, from_login: str, to_login: str) -> bool:
    """Есть ли неотвеченная заявка from -> to. Получатель обязан существовать."""
    to_user = get_user_or_error(db, to_login)
    from_user = find_user(db, from_login)
    if not from_user:
        return False
    return _pending(db, from_user.id, to_user.id) is not None
