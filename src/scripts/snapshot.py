"""
Снимок состояния в JSON-файл и обратно. Запуск:
  $ python -m src.scripts.snapshot export [--path FILE]
  $ python -m src.scripts.snapshot import [--path FILE]
  $ python -m src.scripts.snapshot reset
Путь по умолчанию — JACKUT_SNAPSHOT_PATH (или jackut_snapshot.json).
"""
from __future__ import annotations
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from src.db import SessionLocal, init_db
from src.services.errors import SocialError
from src.services.snapshot import load_snapshot, reset_state, save_snapshot

load_dotenv()
log = logging.getLogger(__name__)

DEFAULT_PATH = os.getenv("JACKUT_SNAPSHOT_PATH", "jackut_snapshot.json")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Jackut state snapshot")
    parser.add_argument("command", choices=["export", "import", "reset"])
    parser.add_argument("--path", default=DEFAULT_PATH)
    args = parser.parse_args(argv)

    init_db()
    with SessionLocal() as db:
        if args.command == "export":
            save_snapshot(db, args.path)
        elif args.command == "import":
            try:
                if load_snapshot(db, args.path) is None:
                    log.warning("nothing imported: %s does not exist", args.path)
            except SocialError as e:
                log.error("snapshot rejected: %s (%s)", e, e.code.name)
                return 1
        else:
            reset_state(db)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    sys.exit(main())
