# src/services/relations.py
# Односторонние отношения: идол/фанат, симпатия, враг.
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from src.models.relation import RelationKind
from src.services.errors import ErrorCode, SocialError
from src.services.events import log_event, IDOL_ADDED, CRUSH_ADDED, CRUSH_MATCHED, ENEMY_ADDED
from src.services.messages import enqueue_message
from src.utils import relations as rel
from src.utils.transactions import commit
from src.utils.user import find_user, get_display_name, get_user_or_error, sorted_logins

# Текст системного recado при взаимной симпатии
CRUSH_MATCH_TEMPLATE = "{name} is your crush - Jackut note."


def admire_user(db: Session, acting_login: str, idol_login: str) -> None:
    """
    acting становится фанатом idol. Порядок проверок:
    существование идола -> вражда -> уже идол -> сам себе.
    Обе стороны (idols у acting и fans у idol) — одна строка, зеркало не рвётся.
    """
    acting = get_user_or_error(db, acting_login)
    idol = find_user(db, idol_login)
    if not idol:
        raise SocialError(ErrorCode.USER_NOT_FOUND)

    if rel.is_blocked(db, acting.id, idol.id):
        raise SocialError(ErrorCode.ENMITY_BLOCK, name=get_display_name(idol))

    if rel.relation_exists(db, acting.id, idol.id, RelationKind.idol):
        raise SocialError(ErrorCode.ALREADY_ADMIRING)

    if acting.id == idol.id:
        raise SocialError(ErrorCode.SELF_ADMIRATION)

    rel.add_relation(db, acting.id, idol.id, RelationKind.idol)
    log_event(db, type=IDOL_ADDED, actor_id=acting.id, target_user_id=idol.id)
    commit(db)


def declare_crush(db: Session, acting_login: str, crush_login: str) -> bool:
    """
    Односторонняя симпатия. Порядок:
      1) сам себе;
      2) существование цели;
      3) вражда;
      4) взаимность: если цель уже отметила acting — обоим уходит системный recado;
      5) уже отмечена (проверяется ПОСЛЕ уведомления, повтор шлёт его снова);
      6) запись.
    Возвращает True, если симпатия взаимная.
    """
    acting = get_user_or_error(db, acting_login)
    if acting.login == crush_login:
        raise SocialError(ErrorCode.SELF_CRUSH)

    crush = find_user(db, crush_login)
    if not crush:
        raise SocialError(ErrorCode.USER_NOT_FOUND)

    if rel.is_blocked(db, acting.id, crush.id):
        raise SocialError(ErrorCode.ENMITY_BLOCK, name=get_display_name(crush))

    mutual = rel.relation_exists(db, crush.id, acting.id, RelationKind.crush)
    if mutual:
        enqueue_message(db, acting.id, CRUSH_MATCH_TEMPLATE.format(name=get_display_name(crush)))
        enqueue_message(db, crush.id, CRUSH_MATCH_TEMPLATE.format(name=get_display_name(acting)))
        log_event(db, type=CRUSH_MATCHED, actor_id=acting.id, target_user_id=crush.id)

    if rel.relation_exists(db, acting.id, crush.id, RelationKind.crush):
        # уведомления уже в очереди: фиксируем их и только потом отказываем
        commit(db)
        raise SocialError(ErrorCode.ALREADY_CRUSHING)

    rel.add_relation(db, acting.id, crush.id, RelationKind.crush)
    log_event(db, type=CRUSH_ADDED, actor_id=acting.id, target_user_id=crush.id)
    commit(db)
    return mutual


def declare_enemy(db: Session, acting_login: str, enemy_login: str) -> None:
    """
    Объявить врага. Хранится односторонне, блокирует в обе стороны.
    Существующие связи не трогаются, блокируются только новые.
    """
    acting = get_user_or_error(db, acting_login)
    if acting.login == enemy_login:
        raise SocialError(ErrorCode.SELF_ENEMY)

    enemy = find_user(db, enemy_login)
    if not enemy:
        raise SocialError(ErrorCode.USER_NOT_FOUND)

    if rel.relation_exists(db, acting.id, enemy.id, RelationKind.enemy):
        raise SocialError(ErrorCode.ALREADY_ENEMIES)

    rel.add_relation(db, acting.id, enemy.id, RelationKind.enemy)
    log_event(db, type=ENEMY_ADDED, actor_id=acting.id, target_user_id=enemy.id)
    commit(db)


# =========================
# ЗАПРОСЫ
# =========================

def is_fan(db: Session, login: str, idol_login: str) -> bool:
    user = get_user_or_error(db, login)
    idol = get_user_or_error(db, idol_login)
    return rel.relation_exists(db, user.id, idol.id, RelationKind.idol)


def list_fans(db: Session, login: str) -> List[str]:
    user = get_user_or_error(db, login)
    return sorted_logins(db, rel.incoming_ids(db, user.id, RelationKind.idol))


def list_idols(db: Session, login: str) -> List[str]:
    user = get_user_or_error(db, login)
    return sorted_logins(db, rel.outgoing_ids(db, user.id, RelationKind.idol))


def is_crush(db: Session, login: str, crush_login: str) -> bool:
    user = get_user_or_error(db, login)
    crush = get_user_or_error(db, crush_login)
    return rel.relation_exists(db, user.id, crush.id, RelationKind.crush)


def list_crushes(db: Session, login: str) -> List[str]:
    user = get_user_or_error(db, login)
    return sorted_logins(db, rel.outgoing_ids(db, user.id, RelationKind.crush))


def is_enemy(db: Session, login: str, enemy_login: str) -> bool:
    """Объявил ли login врагом enemy (одностороннее хранение)."""
    user = get_user_or_error(db, login)
    enemy = get_user_or_error(db, enemy_login)
    return rel.relation_exists(db, user.id, enemy.id, RelationKind.enemy)


def list_enemies(db: Session, login: str) -> List[str]:
    user = get_user_or_error(db, login)
    return sorted_logins(db, rel.outgoing_ids(db, user.id, RelationKind.enemy))


def is_blocked(db: Session, login: str, other_login: str) -> bool:
    """Есть ли вражда между парой в любую сторону."""
    user = get_user_or_error(db, login)
    other = get_user_or_error(db, other_login)
    return rel.is_blocked(db, user.id, other.id)
