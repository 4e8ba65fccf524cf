# src/schemas/user.py

from pydantic import BaseModel
from typing import Dict
from datetime import datetime

class UserOut(BaseModel):
    id: int
    login: str
    name: str
    attributes: Dict[str, str] = {}
    created_at: datetime

    class Config:
        from_attributes = True
