# src/services/communities.py
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from src.models.community import Community
from src.models.community_member import CommunityMember
from src.models.message import MessageKind
from src.models.user import User
from src.schemas.community import CommunityOut
from src.services.errors import ErrorCode, SocialError
from src.services.events import log_event, COMMUNITY_CREATED, MEMBER_ADDED
from src.services.messages import enqueue_message
from src.utils.transactions import commit
from src.utils.user import get_user_or_error


def get_community_or_error(db: Session, name: str) -> Community:
    community = db.query(Community).filter(Community.name == name).first() if name else None
    if not community:
        raise SocialError(ErrorCode.COMMUNITY_NOT_FOUND)
    return community


def community_exists(db: Session, name: str) -> bool:
    return db.query(Community.id).filter(Community.name == name).first() is not None


def is_member(db: Session, community_id: int, user_id: int) -> bool:
    return (
        db.query(CommunityMember)
        .filter(CommunityMember.community_id == community_id, CommunityMember.user_id == user_id)
        .first()
        is not None
    )


def _member_logins(db: Session, community_id: int) -> List[str]:
    rows = (
        db.query(User.login)
        .join(CommunityMember, CommunityMember.user_id == User.id)
        .filter(CommunityMember.community_id == community_id)
        .order_by(CommunityMember.id.asc())
        .all()
    )
    return [r.login for r in rows]


def create_community(db: Session, owner_login: str, name: str, description: str) -> Community:
    """
    Создаёт сообщество; владелец — первый участник. Имя регистрозависимое и уникальное.
    """
    owner = get_user_or_error(db, owner_login)
    if community_exists(db, name):
        raise SocialError(ErrorCode.COMMUNITY_EXISTS)

    community = Community(name=name, description=description or "", owner_id=owner.id)
    db.add(community)
    db.flush()
    db.add(CommunityMember(community_id=community.id, user_id=owner.id))
    log_event(db, type=COMMUNITY_CREATED, actor_id=owner.id, community_id=community.id, data={"name": name})
    commit(db)
    return community


def get_description(db: Session, name: str) -> str:
    return get_community_or_error(db, name).description


def get_owner(db: Session, name: str) -> str:
    return get_community_or_error(db, name).owner.login


def list_members(db: Session, name: str) -> List[str]:
    """Участники в порядке вступления (владелец первым)."""
    community = get_community_or_error(db, name)
    return _member_logins(db, community.id)


def describe_community(db: Session, name: str) -> CommunityOut:
    community = get_community_or_error(db, name)
    return CommunityOut(
        name=community.name,
        description=community.description,
        owner=community.owner.login,
        members=_member_logins(db, community.id),
    )


def join_community(db: Session, login: str, name: str) -> None:
    user = get_user_or_error(db, login)
    community = get_community_or_error(db, name)
    if is_member(db, community.id, user.id):
        raise SocialError(ErrorCode.ALREADY_MEMBER)

    db.add(CommunityMember(community_id=community.id, user_id=user.id))
    log_event(db, type=MEMBER_ADDED, actor_id=user.id, community_id=community.id, data={"name": name})
    commit(db)


def list_user_communities(db: Session, login: str) -> List[str]:
    """
    Сначала свои сообщества (по алфавиту), затем те, где просто участник (по алфавиту).
    """
    user = get_user_or_error(db, login)
    rows = (
        db.query(Community)
        .join(CommunityMember, CommunityMember.community_id == Community.id)
        .filter(CommunityMember.user_id == user.id)
        .all()
    )
    owned = sorted(c.name for c in rows if c.owner_id == user.id)
    joined = sorted(c.name for c in rows if c.owner_id != user.id)
    return owned + joined


def send_community_message(db: Session, sender_login: str, name: str, text: str) -> int:
    """
    Рассылка: текст попадает в очередь сообщений каждого участника (включая отправителя).
    Возвращает число получателей.
    """
    sender = get_user_or_error(db, sender_login)
    community = get_community_or_error(db, name)
    member_ids = [
        uid for (uid,) in db.query(CommunityMember.user_id)
        .filter(CommunityMember.community_id == community.id)
        .order_by(CommunityMember.id.asc())
        .all()
    ]
    for uid in member_ids:
        enqueue_message(
            db, uid, text,
            kind=MessageKind.community,
            sender_id=sender.id,
            community_name=community.name,
        )
    commit(db)
    return len(member_ids)


def drop_user_from_communities(db: Session, user_id: int) -> List[str]:
    """
    Для каскадного удаления аккаунта: сообщества пользователя удаляются целиком,
    из остальных он выходит. Без commit. Возвращает имена удалённых сообществ.
    """
    owned = db.query(Community).filter(Community.owner_id == user_id).all()
    owned_ids = [c.id for c in owned]
    if owned_ids:
        db.query(CommunityMember).filter(
            CommunityMember.community_id.in_(owned_ids)
        ).delete()
        db.query(Community).filter(Community.id.in_(owned_ids)).delete()
    db.query(CommunityMember).filter(CommunityMember.user_id == user_id).delete()
    return [c.name for c in owned]
