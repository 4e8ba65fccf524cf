# src/models/event.py
from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from src.db import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    # кто совершил действие
    actor_id = Column(Integer, nullable=False, index=True)

    # над кем действие (дружба, идол, враг) — может быть NULL
    target_user_id = Column(Integer, nullable=True, index=True)

    # к какому сообществу относится (NULL для персональных событий)
    community_id = Column(Integer, nullable=True)

    # тип события
    type = Column(String(64), nullable=False)

    # произвольные данные события
    data = Column(JSON, nullable=True, default=dict)

    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Event id={self.id} type={self.type} actor={self.actor_id} target={self.target_user_id}>"
