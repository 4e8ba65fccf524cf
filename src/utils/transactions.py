# src/utils/transactions.py

from sqlalchemy.orm import Session


def commit(db: Session) -> None:
    """
    Один commit на публичную операцию. Если commit упал — откатываем,
    чтобы сессия не осталась в полузаписанном состоянии, и пробрасываем ошибку.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
