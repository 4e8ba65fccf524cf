# src/schemas/snapshot.py
# Снимок всего состояния директории (ExportState / ImportState).
# Формат хранения снимка — забота внешнего слоя; здесь только структура данных.

from __future__ import annotations

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

SNAPSHOT_VERSION = 1


class MessageSnapshot(BaseModel):
    sender: Optional[str] = None  # None — системное сообщение
    text: str
    community: Optional[str] = None


class UserSnapshot(BaseModel):
    """
    Фанаты не хранятся: это зеркало idols, при импорте они восстанавливаются сами.
    """
    login: str
    password: str
    name: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)
    friends: List[str] = Field(default_factory=list)
    pending: List[str] = Field(default_factory=list)    # в порядке поступления
    idols: List[str] = Field(default_factory=list)
    crushes: List[str] = Field(default_factory=list)
    enemies: List[str] = Field(default_factory=list)
    notes: List[MessageSnapshot] = Field(default_factory=list)     # FIFO
    messages: List[MessageSnapshot] = Field(default_factory=list)  # FIFO


class CommunitySnapshot(BaseModel):
    name: str
    description: str = ""
    owner: str
    members: List[str] = Field(default_factory=list)  # в порядке вступления


class StateSnapshot(BaseModel):
    version: int = SNAPSHOT_VERSION
    users: List[UserSnapshot] = Field(default_factory=list)
    communities: List[CommunitySnapshot] = Field(default_factory=list)
