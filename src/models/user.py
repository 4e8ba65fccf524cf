# src/models/user.py

from sqlalchemy import Column, Integer, String, DateTime, func
from src.db import Base

class User(Base):
    """
    Запись пользователя в директории: login — уникальный и неизменяемый ключ
    (регистрозависимый). Все отношения ссылаются на users.id.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    login = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")  # Отображаемое имя
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, login={self.login}, name={self.name})>"
