from typing import Any, Dict, List, Optional, Tuple
import logging

from inkpress.common.repository import BackendError, BaseRepository

logger = logging.getLogger("posts.repository")

WITH_AUTHOR = "*, profiles(username)"

class PostRepository(BaseRepository):
    async def list_published(self, offset: int, limit: int) -> Tuple[List[dict], int]:
        resp = await self._exec(
            self.client.table("posts")
            .select(WITH_AUTHOR, count="exact")
            .eq("status", "published")
            .order("created_at", desc=True)
            .range(offset, offset + max(limit, 1) - 1)
            .execute(),
            op="posts.list_published",
        )
        return self._rows(resp), getattr(resp, "count", None) or 0

    async def get_published(self, post_id: str) -> Optional[dict]:
        resp = await self._exec(
            self.client.table("posts")
            .select(WITH_AUTHOR)
            .eq("id", post_id)
            .eq("status", "published")
            .limit(1)
            .execute(),
            op="posts.select_published",
        )
        return self._first(resp)

    async def get_by_id(self, post_id: str) -> Optional[dict]:
        resp = await self._exec(
            self.client.table("posts").select("*").eq("id", post_id).limit(1).execute(),
            op="posts.select_by_id",
        )
        return self._first(resp)

    async def list_by_author(self, author_id: str, status: Optional[str] = None) -> List[dict]:
        query = self.client.table("posts").select("*").eq("author_id", author_id)
        if status:
            query = query.eq("status", status)
        resp = await self._exec(query.order("created_at", desc=True).execute(), op="posts.list_by_author")
        return self._rows(resp)

    async def list_all(self, status: Optional[str] = None) -> List[dict]:
        query = self.client.table("posts").select(WITH_AUTHOR)
        if status:
            query = query.eq("status", status)
        resp = await self._exec(query.order("created_at", desc=True).execute(), op="posts.list_all")
        return self._rows(resp)

    async def list_columns(self, columns: str, status: Optional[str] = None, author_id: Optional[str] = None) -> List[dict]:
        query = self.client.table("posts").select(columns)
        if status:
            query = query.eq("status", status)
        if author_id:
            query = query.eq("author_id", author_id)
        resp = await self._exec(query.order("created_at", desc=False).execute(), op="posts.list_columns")
        return self._rows(resp)

    async def create_post(self, record: Dict[str, Any]) -> dict:
        resp = await self._exec(self.client.table("posts").insert(record).execute(), op="posts.insert")
        rows = self._rows(resp)
        if not rows:
            raise BackendError("posts.insert", "no row returned")
        return rows[0]

    async def update_post(self, post_id: str, fields: Dict[str, Any], author_id: Optional[str] = None) -> Optional[dict]:
        query = self.client.table("posts").update(fields).eq("id", post_id)
        if author_id is not None:
            query = query.eq("author_id", author_id)
        resp = await self._exec(query.execute(), op="posts.update")
        rows = self._rows(resp)
        return rows[0] if rows else None

    async def increment_view_count(self, post: Dict[str, Any]) -> int:
        # A view is not an edit; keep updated_at as it was.
        views = (post.get("view_count") or 0) + 1
        patch: Dict[str, Any] = {"view_count": views}
        if post.get("updated_at"):
            patch["updated_at"] = post["updated_at"]
        resp = await self._exec(
            self.client.table("posts").update(patch).eq("id", post["id"]).execute(), op="posts.view"
        )
        rows = self._rows(resp)
        return rows[0].get("view_count", views) if rows else views

    async def delete_post(self, post_id: str, author_id: Optional[str] = None) -> bool:
        query = self.client.table("posts").delete().eq("id", post_id)
        if author_id is not None:
            query = query.eq("author_id", author_id)
        resp = await self._exec(query.execute(), op="posts.delete")
        return bool(self._rows(resp))
