"""
Command-line tools, pointed at a throwaway SQLite file.
"""

import pytest
from sqlalchemy.orm import sessionmaker

from src.db import Base, make_engine
from src.scripts import seed_users, snapshot
from src.services.accounts import user_exists
from src.services.friends import list_friends


@pytest.fixture
def file_db(tmp_path, monkeypatch):
    engine = make_engine(f"sqlite:///{tmp_path / 'jackut.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    for module in (seed_users, snapshot):
        monkeypatch.setattr(module, "SessionLocal", Session)
        monkeypatch.setattr(module, "init_db", lambda: None)
    yield Session
    engine.dispose()


def test_seed_is_idempotent(file_db):
    assert seed_users.seed() == 4
    assert seed_users.seed() == 0
    with file_db() as db:
        assert user_exists(db, "maria")


def test_export_reset_import(file_db, tmp_path):
    seed_users.seed()
    path = str(tmp_path / "state.json")

    assert snapshot.main(["export", "--path", path]) == 0
    assert snapshot.main(["reset"]) == 0
    with file_db() as db:
        assert not user_exists(db, "joao")

    assert snapshot.main(["import", "--path", path]) == 0
    with file_db() as db:
        assert user_exists(db, "joao")
        assert list_friends(db, "joao") == []


def test_import_missing_file(file_db, tmp_path):
    assert snapshot.main(["import", "--path", str(tmp_path / "nope.json")]) == 0


def test_import_invalid_snapshot(file_db, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"users": [{"login": "a", "password": "p", "idols": ["ghost"]}]}')
    assert snapshot.main(["import", "--path", str(path)]) == 1


def test_import_colliding_attribute_keys(file_db, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(
        '{"users": [{"login": "a", "password": "p",'
        ' "attributes": {"Cidade": "A", "cidade": "B"}}]}'
    )
    assert snapshot.main(["import", "--path", str(path)]) == 1
