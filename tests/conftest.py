import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.db import Base
from src.services.accounts import create_user

LOGINS = ("ana", "bruno", "carla", "joao", "maria")


@pytest.fixture
def db():
    """Fresh in-memory directory per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def users(db):
    """Registers ana, bruno, carla, joao and maria (name = capitalized login)."""
    for login in LOGINS:
        create_user(db, login, f"{login}-pw", login.capitalize())
    return LOGINS
