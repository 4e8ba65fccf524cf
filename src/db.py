# src/db.py
# Инициализация SQLAlchemy: движок, сессии, Base и явные импорты моделей.

from __future__ import annotations

import logging
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./jackut.db")

log = logging.getLogger(__name__)


def make_engine(url: str):
    """
    SQLite — без пула и с check_same_thread=False,
    серверные БД — с пулом как в проде.
    """
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_size=20,
        max_overflow=20,
        pool_timeout=60,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

from src.models import (
    user,
    session,
    profile_attribute,
    friend,
    friend_request,
    relation,
    message,
    community,
    community_member,
    event,
)


def init_db(bind=None) -> None:
    """
    Создаёт таблицы напрямую (локальная разработка и тесты).
    В проде схему ведёт alembic.
    """
    target = bind or engine
    Base.metadata.create_all(bind=target)
    log.info("schema initialised on %s", target.url)
