from typing import Any, Dict, List, Optional
import logging

from fastapi import HTTPException, status

from inkpress.common.utils import page_bounds, paginate_meta
from inkpress.core.config import get_settings
from inkpress.features.comments.repository import CommentRepository
from .repository import PostRepository
from .schemas import PostCreate, PostUpdate

logger = logging.getLogger("posts.service")


class PostService:
    def __init__(self, client: Any) -> None:
        self.repository = PostRepository(client)
        self.comments = CommentRepository(client)

    async def list_published(self, page: int = 1, per_page: Optional[int] = None) -> Dict[str, Any]:
        per_page = per_page or get_settings().posts_per_page
        start, end = page_bounds(page, per_page)
        items, total = await self.repository.list_published(start, end - start + 1)
        return {"items": items, "pagination": paginate_meta(total, max(1, page), per_page)}

    async def get_published(self, post_id: str, *, count_view: bool = True) -> Dict[str, Any]:
        """Public post detail; each read counts as one view."""
        post = await self.repository.get_published(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        if count_view:
            post["view_count"] = await self.repository.increment_view_count(post)
        return post

    async def get_for_editing(self, post_id: str, author_id: Optional[str] = None) -> Dict[str, Any]:
        """Any post, drafts included. ``author_id`` restricts to the owner."""
        post = await self.repository.get_by_id(post_id)
        if not post or (author_id is not None and post.get("author_id") != author_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        return post

    async def list_for_author(self, author_id: str, status_filter: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.repository.list_by_author(author_id, _status(status_filter))

    async def list_all(self, status_filter: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.repository.list_all(_status(status_filter))

    async def create_post(self, author_id: str, data: PostCreate) -> Dict[str, Any]:
        record = {
            "title": data.title.strip(),
            "summary": (data.summary or "").strip(),
            "content": data.content.strip(),
            "status": data.status,
            "author_id": author_id,
            "view_count": 0,
            "like_count": 0,
        }
        post = await self.repository.create_post(record)
        logger.info("post_created id=%s author_id=%s status=%s", post.get("id"), author_id, post.get("status"))
        return post

    async def update_post(self, post_id: str, author_id: Optional[str], data: PostUpdate) -> Dict[str, Any]:
        fields = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not fields:
            return await self.get_for_editing(post_id, author_id)
        updated = await self.repository.update_post(post_id, fields, author_id=author_id)
        if not updated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        return updated

    async def delete_post(self, post_id: str, author_id: Optional[str] = None) -> None:
        """Delete a post and its comments. ``author_id`` restricts to the owner."""
        deleted = await self.repository.delete_post(post_id, author_id=author_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        removed = await self.comments.delete_for_post(post_id)
        logger.info("post_deleted id=%s comments_removed=%d", post_id, removed)


def _status(value: Optional[str]) -> Optional[str]:
    # "all" is what the dashboards send for no filter
    if not value or value == "all":
        return None
    return value
