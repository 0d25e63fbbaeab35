from typing import Any, Dict, List, Optional
import logging

from inkpress.common.repository import BackendError, BaseRepository

logger = logging.getLogger("comments.repository")

WITH_AUTHOR = "*, profiles(username)"

class CommentRepository(BaseRepository):
    async def list_for_post(self, post_id: str) -> List[dict]:
        resp = await self._exec(
            self.client.table("comments")
            .select(WITH_AUTHOR)
            .eq("post_id", post_id)
            .order("created_at", desc=False)
            .execute(),
            op="comments.list_for_post",
        )
        return self._rows(resp)

    async def list_all(self, post_id: Optional[str] = None) -> List[dict]:
        query = self.client.table("comments").select("*, profiles(username), posts(title, id)")
        if post_id:
            query = query.eq("post_id", post_id)
        resp = await self._exec(query.order("created_at", desc=True).execute(), op="comments.list_all")
        return self._rows(resp)

    async def list_by_user(self, user_id: str) -> List[dict]:
        resp = await self._exec(
            self.client.table("comments")
            .select("*, posts(title, id)")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute(),
            op="comments.list_by_user",
        )
        return self._rows(resp)

    async def list_for_posts(self, post_ids: List[str], columns: str = "*") -> List[dict]:
        if not post_ids:
            return []
        resp = await self._exec(
            self.client.table("comments").select(columns).in_("post_id", post_ids).execute(),
            op="comments.list_for_posts",
        )
        return self._rows(resp)

    async def count_all(self) -> int:
        resp = await self._exec(self.client.table("comments").select("id", count="exact").execute(), op="comments.count")
        return getattr(resp, "count", None) or 0

    async def get_by_id(self, comment_id: str) -> Optional[dict]:
        resp = await self._exec(
            self.client.table("comments").select(WITH_AUTHOR).eq("id", comment_id).limit(1).execute(),
            op="comments.select_by_id",
        )
        return self._first(resp)

    async def create_comment(self, record: Dict[str, Any]) -> dict:
        resp = await self._exec(self.client.table("comments").insert([record]).execute(), op="comments.insert")
        rows = self._rows(resp)
        if not rows:
            raise BackendError("comments.insert", "no row returned")
        return rows[0]

    async def update_content(self, comment_id: str, content: str) -> Optional[dict]:
        resp = await self._exec(
            self.client.table("comments").update({"content": content}).eq("id", comment_id).execute(),
            op="comments.update",
        )
        rows = self._rows(resp)
        return rows[0] if rows else None

    async def delete_comment(self, comment_id: str) -> bool:
        resp = await self._exec(
            self.client.table("comments").delete().eq("id", comment_id).execute(),
            op="comments.delete",
        )
        return bool(self._rows(resp))

    async def delete_for_post(self, post_id: str) -> int:
        resp = await self._exec(
            self.client.table("comments").delete().eq("post_id", post_id).execute(),
            op="comments.delete_for_post",
        )
        return len(self._rows(resp))
