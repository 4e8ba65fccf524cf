# src/services/snapshot.py
# ЭКСПОРТ / ИМПОРТ СОСТОЯНИЯ ДИРЕКТОРИИ ЦЕЛИКОМ
# -----------------------------------------------------------------------------
# export_state: собирает StateSnapshot (pydantic) из всех таблиц.
# import_state: заменяет директорию снимком в ОДНОЙ транзакции.
# save_snapshot / load_snapshot: JSON-файл поверх этих двух функций.
# reset_state: полная очистка (аналог «обнулить систему»).
#
# Сессии и события в снимок не входят.

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from src.models.community import Community
from src.models.community_member import CommunityMember
from src.models.event import Event
from src.models.friend import Friend
from src.models.friend_request import FriendRequest
from src.models.message import Message, MessageKind
from src.models.profile_attribute import ProfileAttribute
from src.models.relation import RelationKind, UserRelation
from src.models.session import UserSession
from src.models.user import User
from src.schemas.snapshot import (
    CommunitySnapshot,
    MessageSnapshot,
    StateSnapshot,
    UserSnapshot,
)
from src.services.errors import ErrorCode, SocialError
from src.utils.transactions import commit

log = logging.getLogger(__name__)

# Порядок очистки: сначала зависимые таблицы
_WIPE_ORDER = (
    Event,
    Message,
    CommunityMember,
    Community,
    UserRelation,
    FriendRequest,
    Friend,
    ProfileAttribute,
    UserSession,
    User,
)

_RELATION_FIELDS = {
    RelationKind.idol: "idols",
    RelationKind.crush: "crushes",
    RelationKind.enemy: "enemies",
}


def _wipe(db: Session) -> None:
    for model in _WIPE_ORDER:
        db.query(model).delete()


def reset_state(db: Session) -> None:
    _wipe(db)
    commit(db)
    log.info("state reset: all tables wiped")


def export_state(db: Session) -> StateSnapshot:
    users = db.query(User).order_by(User.id.asc()).all()
    login_of: Dict[int, str] = {u.id: u.login for u in users}
    snaps: Dict[int, UserSnapshot] = {
        u.id: UserSnapshot(login=u.login, password=u.password, name=u.name or "")
        for u in users
    }

    for attr in db.query(ProfileAttribute).order_by(ProfileAttribute.key.asc()).all():
        snaps[attr.user_id].attributes[attr.key] = attr.value

    friends: Dict[int, List[str]] = defaultdict(list)
    for link in db.query(Friend).all():
        friends[link.user_min].append(login_of[link.user_max])
        friends[link.user_max].append(login_of[link.user_min])
    for uid, logins in friends.items():
        snaps[uid].friends = sorted(logins)

    for req in db.query(FriendRequest).order_by(FriendRequest.id.asc()).all():
        snaps[req.target_id].pending.append(login_of[req.requester_id])

    for r in db.query(UserRelation).order_by(UserRelation.id.asc()).all():
        getattr(snaps[r.user_id], _RELATION_FIELDS[r.kind]).append(login_of[r.target_id])
    for snap in snaps.values():
        snap.idols.sort()
        snap.crushes.sort()
        snap.enemies.sort()

    for m in db.query(Message).order_by(Message.id.asc()).all():
        item = MessageSnapshot(
            sender=login_of.get(m.sender_id) if m.sender_id is not None else None,
            text=m.text,
            community=m.community_name,
        )
        queue = snaps[m.recipient_id].notes if m.kind == MessageKind.note else snaps[m.recipient_id].messages
        queue.append(item)

    members: Dict[int, List[str]] = defaultdict(list)
    for cm in db.query(CommunityMember).order_by(CommunityMember.id.asc()).all():
        members[cm.community_id].append(login_of[cm.user_id])
    communities = [
        CommunitySnapshot(
            name=c.name,
            description=c.description,
            owner=login_of[c.owner_id],
            members=members.get(c.id, []),
        )
        for c in db.query(Community).order_by(Community.id.asc()).all()
    ]

    return StateSnapshot(users=[snaps[u.id] for u in users], communities=communities)


def _validate(snapshot: StateSnapshot) -> None:
    """
    Все ссылки на логины должны указывать на пользователей из снимка.
    Проверяем до записи, чтобы не начинать транзакцию впустую.
    """
    logins: Set[str] = set()
    for u in snapshot.users:
        if u.login in logins:
            raise SocialError(ErrorCode.LOGIN_TAKEN)
        logins.add(u.login)

    def _known(login: Optional[str]) -> None:
        if login is not None and login not in logins:
            raise SocialError(ErrorCode.USER_NOT_FOUND)

    self_codes = (
        ("friends", ErrorCode.SELF_FRIENDSHIP),
        ("pending", ErrorCode.SELF_FRIENDSHIP),
        ("idols", ErrorCode.SELF_ADMIRATION),
        ("crushes", ErrorCode.SELF_CRUSH),
        ("enemies", ErrorCode.SELF_ENEMY),
    )
    for u in snapshot.users:
        for field, code in self_codes:
            if u.login in getattr(u, field):
                raise SocialError(code)
        for login in (*u.friends, *u.pending, *u.idols, *u.crushes, *u.enemies):
            _known(login)
        for m in (*u.notes, *u.messages):
            _known(m.sender)
        keys = [key.lower() for key in u.attributes]
        if len(keys) != len(set(keys)):
            raise SocialError(ErrorCode.DUPLICATE_ATTRIBUTE)

    # пара не может быть одновременно друзьями и заявкой; заявка только в одну сторону
    friend_pairs = {
        frozenset((u.login, other)) for u in snapshot.users for other in u.friends
    }
    requests = {(requester, u.login) for u in snapshot.users for requester in u.pending}
    for requester, target in requests:
        if frozenset((requester, target)) in friend_pairs:
            raise SocialError(ErrorCode.ALREADY_FRIENDS)
        if (target, requester) in requests:
            raise SocialError(ErrorCode.REQUEST_ALREADY_PENDING)

    names: Set[str] = set()
    for c in snapshot.communities:
        if c.name in names:
            raise SocialError(ErrorCode.COMMUNITY_EXISTS)
        names.add(c.name)
        _known(c.owner)
        for login in c.members:
            _known(login)


def import_state(db: Session, snapshot: StateSnapshot) -> None:
    """
    Полностью заменяет директорию содержимым снимка. Либо всё, либо ничего.
    """
    _validate(snapshot)
    try:
        _rebuild(db, snapshot)
    except Exception:
        db.rollback()
        raise
    commit(db)
    log.info(
        "state imported: %d users, %d communities",
        len(snapshot.users), len(snapshot.communities),
    )


def _rebuild(db: Session, snapshot: StateSnapshot) -> None:
    _wipe(db)

    ids: Dict[str, int] = {}
    for u in snapshot.users:
        user = User(login=u.login, password=u.password, name=u.name)
        db.add(user)
        db.flush()
        ids[u.login] = user.id
        for key, value in u.attributes.items():
            db.add(ProfileAttribute(user_id=user.id, key=key.lower(), value=value))

    pairs: Set[Tuple[int, int]] = set()
    for u in snapshot.users:
        me = ids[u.login]
        for login in u.friends:
            other = ids[login]
            pair = (me, other) if me < other else (other, me)
            if pair not in pairs:
                pairs.add(pair)
                db.add(Friend(user_min=pair[0], user_max=pair[1]))
        for login in dict.fromkeys(u.pending):
            db.add(FriendRequest(requester_id=ids[login], target_id=me))
        for kind, field in _RELATION_FIELDS.items():
            for login in dict.fromkeys(getattr(u, field)):
                db.add(UserRelation(user_id=me, target_id=ids[login], kind=kind))
        for kind, queue in ((MessageKind.note, u.notes), (MessageKind.community, u.messages)):
            for m in queue:
                db.add(Message(
                    recipient_id=me,
                    sender_id=ids[m.sender] if m.sender is not None else None,
                    kind=kind,
                    community_name=m.community,
                    text=m.text,
                ))
        # фиксируем порядок id (FIFO, порядок заявок) внутри пользователя
        db.flush()

    for c in snapshot.communities:
        community = Community(name=c.name, description=c.description, owner_id=ids[c.owner])
        db.add(community)
        db.flush()
        members = list(dict.fromkeys(c.members))
        if c.owner not in members:
            members.insert(0, c.owner)
        for login in members:
            db.add(CommunityMember(community_id=community.id, user_id=ids[login]))
        db.flush()


def save_snapshot(db: Session, path: str | Path) -> Path:
    target = Path(path)
    target.write_text(export_state(db).model_dump_json(indent=2), encoding="utf-8")
    log.info("snapshot saved to %s", target)
    return target


def load_snapshot(db: Session, path: str | Path) -> Optional[StateSnapshot]:
    """
    Читает снимок из файла и импортирует его. Нет файла — директория не трогается.
    """
    source = Path(path)
    if not source.exists():
        log.info("snapshot %s not found, keeping current state", source)
        return None
    snapshot = StateSnapshot.model_validate_json(source.read_text(encoding="utf-8"))
    import_state(db, snapshot)
    return snapshot
