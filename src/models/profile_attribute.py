# src/models/profile_attribute.py

from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from src.db import Base

class ProfileAttribute(Base):
    """
    Произвольный атрибут профиля. Ключ хранится в нижнем регистре,
    поэтому поиск по нему регистронезависимый.
    """
    __tablename__ = "profile_attributes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String, nullable=False)
    value = Column(String, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_profile_attributes_user_key"),
    )
