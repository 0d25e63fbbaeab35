from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field

class CommentAuthor(BaseModel):
    username: Optional[str] = None

class CommentPost(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None

class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)

class Comment(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    profiles: Optional[CommentAuthor] = None
    posts: Optional[CommentPost] = None

    class Config:
        from_attributes = True
