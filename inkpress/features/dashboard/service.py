"""Aggregate statistics for the author dashboard and the admin console."""

from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from inkpress.common.utils import current_timestamp, sum_column
from inkpress.features.comments.repository import CommentRepository
from inkpress.features.posts.repository import PostRepository

TREND_DAYS = 7


def view_trend(rows: List[Dict[str, Any]], today: Optional[date] = None, days: int = TREND_DAYS) -> List[Dict[str, Any]]:
    """Views of posts created on each of the last ``days`` days, oldest first."""
    today = today or current_timestamp().date()
    points = []
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        day_rows = [r for r in rows if str(r.get("created_at") or "").startswith(day)]
        points.append({"date": day, "views": sum_column(day_rows, "view_count")})
    return points


def _summarise(posts: List[Dict[str, Any]], comment_total: int, views_over: List[Dict[str, Any]], trend_rows, today) -> Dict[str, Any]:
    published = [p for p in posts if p.get("status") == "published"]
    drafts = [p for p in posts if p.get("status") == "draft"]
    return {
        "total_posts": len(posts),
        "published_posts": len(published),
        "draft_posts": len(drafts),
        "total_comments": comment_total,
        "total_views": sum_column(views_over, "view_count"),
        "total_likes": sum_column(views_over, "like_count"),
        "view_trend": view_trend(trend_rows, today),
    }


class DashboardService:
    def __init__(self, client: Any) -> None:
        self.posts = PostRepository(client)
        self.comments = CommentRepository(client)

    async def site_stats(self, today: Optional[date] = None) -> Dict[str, Any]:
        posts, comment_total, trend_rows = await asyncio.gather(
            self.posts.list_columns("status, view_count, like_count, created_at"),
            self.comments.count_all(),
            self.posts.list_columns("view_count, created_at", status="published"),
        )
        # Site-wide totals count every post, drafts included.
        return _summarise(posts, comment_total, posts, trend_rows, today)

    async def author_stats(self, author_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        posts, own_comments = await asyncio.gather(
            self.posts.list_by_author(author_id),
            self.comments.list_by_user(author_id),
        )
        published = [p for p in posts if p.get("status") == "published"]
        # An author's views and likes only count published posts.
        return _summarise(posts, len(own_comments), published, published, today)
