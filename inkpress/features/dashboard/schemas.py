from __future__ import annotations
from typing import List
from pydantic import BaseModel

class TrendPoint(BaseModel):
    date: str
    views: int

class DashboardStats(BaseModel):
    total_posts: int
    published_posts: int
    draft_posts: int
    total_comments: int
    total_views: int
    total_likes: int
    view_trend: List[TrendPoint]
