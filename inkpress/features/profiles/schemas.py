from __future__ import annotations
from typing import Optional
from pydantic import BaseModel

class ProfileCreate(BaseModel):
    id: str
    username: str
    role: str = "user"

class Profile(BaseModel):
    id: str
    username: str
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True
