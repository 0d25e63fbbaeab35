from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

PostStatus = Literal["draft", "published"]

class PostAuthor(BaseModel):
    username: Optional[str] = None

class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    summary: Optional[str] = ""
    content: str = Field(min_length=1)
    status: PostStatus = "draft"

class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    summary: Optional[str] = None
    content: Optional[str] = Field(default=None, min_length=1)
    status: Optional[PostStatus] = None

class Post(BaseModel):
    id: str
    title: str
    summary: Optional[str] = ""
    content: str
    status: str
    view_count: int = 0
    like_count: int = 0
    author_id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    profiles: Optional[PostAuthor] = None

    class Config:
        from_attributes = True

class PostPage(BaseModel):
    """One page of the public post list"""
    items: List[Post]
    pagination: Dict[str, Any]
