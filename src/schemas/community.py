# src/schemas/community.py

from pydantic import BaseModel
from typing import List

class CommunityOut(BaseModel):
    """
    Сообщество в удобном для вызывающего виде: логины вместо id,
    участники в порядке вступления.
    """
    name: str
    description: str
    owner: str
    members: List[str]
