"""
Идемпотентный сидинг демо-пользователей. Запуск:
  $ python -m src.scripts.seed_users
"""
from __future__ import annotations
import logging
import os

from dotenv import load_dotenv

from src.db import SessionLocal, init_db
from src.services.accounts import create_user, user_exists
from src.services.profile import edit_profile

load_dotenv()
log = logging.getLogger(__name__)

USERS = [
    {"login": "joao", "password": "joao123", "name": "João Silva",
     "attributes": {"cidade": "Maceió"}},
    {"login": "maria", "password": "maria123", "name": "Maria Souza",
     "attributes": {"cidade": "Recife"}},
    {"login": "ana", "password": "ana123", "name": "Ana Lima", "attributes": {}},
    {"login": "bruno", "password": "bruno123", "name": "Bruno Costa", "attributes": {}},
]


def seed() -> int:
    created = 0
    init_db()
    with SessionLocal() as db:
        for row in USERS:
            if user_exists(db, row["login"]):
                continue
            create_user(db, row["login"], row["password"], row["name"])
            for key, value in row["attributes"].items():
                edit_profile(db, row["login"], key, value)
            created += 1
    return created


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    log.info("seeded %d users", seed())
