from typing import Any, Dict, List, Optional
import logging

from fastapi import HTTPException, status

from inkpress.features.posts.repository import PostRepository
from inkpress.features.profiles.service import EDITOR_ROLES
from .repository import CommentRepository

logger = logging.getLogger("comments.service")


class CommentService:
    def __init__(self, client: Any) -> None:
        self.repository = CommentRepository(client)
        self.posts = PostRepository(client)

    async def list_for_post(self, post_id: str) -> List[Dict[str, Any]]:
        return await self.repository.list_for_post(post_id)

    async def list_all(self, post_id: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.repository.list_all(post_id)

    async def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        return await self.repository.list_by_user(user_id)

    async def add_comment(self, post_id: str, user_id: str, content: str) -> Dict[str, Any]:
        post = await self.posts.get_published(post_id)
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
        created = await self.repository.create_comment(
            {"post_id": post_id, "user_id": user_id, "content": content.strip()}
        )
        # Writes return bare rows; re-read to embed the author.
        return await self.repository.get_by_id(created["id"]) or created

    async def _editable(self, comment_id: str, user_id: str, role: str) -> Dict[str, Any]:
        comment = await self.repository.get_by_id(comment_id)
        if not comment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
        if comment.get("user_id") != user_id and role not in EDITOR_ROLES:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to modify this comment")
        return comment

    async def update_comment(self, comment_id: str, user_id: str, role: str, content: str) -> Dict[str, Any]:
        comment = await self._editable(comment_id, user_id, role)
        updated = await self.repository.update_content(comment_id, content.strip())
        if not updated:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
        return {**updated, "profiles": comment.get("profiles")}

    async def delete_comment(self, comment_id: str, user_id: str, role: str) -> None:
        await self._editable(comment_id, user_id, role)
        await self.repository.delete_comment(comment_id)
        logger.info("comment_deleted id=%s by=%s", comment_id, user_id)

    async def moderate_delete(self, comment_id: str) -> None:
        if not await self.repository.delete_comment(comment_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
