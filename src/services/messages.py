# src/services/messages.py
# Личные «recado» и рассылки сообществ. У каждого пользователя две FIFO-очереди.
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from src.models.message import Message, MessageKind
from src.models.user import User
from src.services.errors import ErrorCode, SocialError
from src.utils.relations import is_blocked
from src.utils.transactions import commit
from src.utils.user import find_user, get_display_name, get_user_or_error


def enqueue_message(
    db: Session,
    recipient_id: int,
    text: str,
    *,
    kind: MessageKind = MessageKind.note,
    sender_id: Optional[int] = None,
    community_name: Optional[str] = None,
) -> Message:
    """Кладёт сообщение в конец очереди получателя. Без commit."""
    msg = Message(
        recipient_id=recipient_id,
        sender_id=sender_id,
        kind=kind,
        community_name=community_name,
        text=text,
    )
    db.add(msg)
    return msg


def send_note(db: Session, sender_login: str, recipient_login: str, text: str) -> None:
    """
    Личный recado. Проверки: существование -> себе -> вражда (в любую сторону).
    """
    sender = get_user_or_error(db, sender_login)
    recipient = find_user(db, recipient_login)
    if not recipient:
        raise SocialError(ErrorCode.USER_NOT_FOUND)
    if sender.id == recipient.id:
        raise SocialError(ErrorCode.SELF_NOTE)
    if is_blocked(db, sender.id, recipient.id):
        raise SocialError(ErrorCode.ENMITY_BLOCK, name=get_display_name(recipient))

    enqueue_message(db, recipient.id, text, sender_id=sender.id)
    commit(db)


def deliver_system_message(db: Session, recipient_login: str, text: str) -> None:
    """Системный recado (без отправителя), вражда не проверяется."""
    recipient = get_user_or_error(db, recipient_login)
    enqueue_message(db, recipient.id, text)
    commit(db)


def _pop(db: Session, user: User, kind: MessageKind) -> Optional[str]:
    msg = (
        db.query(Message)
        .filter(Message.recipient_id == user.id, Message.kind == kind)
        .order_by(Message.id.asc())
        .first()
    )
    if msg is None:
        return None
    text = msg.text
    db.delete(msg)
    commit(db)
    return text


def read_note(db: Session, login: str) -> str:
    user = get_user_or_error(db, login)
    text = _pop(db, user, MessageKind.note)
    if text is None:
        raise SocialError(ErrorCode.NO_NOTES)
    return text


def read_message(db: Session, login: str) -> str:
    user = get_user_or_error(db, login)
    text = _pop(db, user, MessageKind.community)
    if text is None:
        raise SocialError(ErrorCode.NO_MESSAGES)
    return text


def count_pending(db: Session, login: str, kind: MessageKind = MessageKind.note) -> int:
    user = get_user_or_error(db, login)
    return db.query(Message).filter(Message.recipient_id == user.id, Message.kind == kind).count()
