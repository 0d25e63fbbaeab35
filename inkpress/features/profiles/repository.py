from typing import Any, Dict, Optional
import logging

from inkpress.common.repository import BackendError, BaseRepository
from .schemas import ProfileCreate

logger = logging.getLogger("profiles.repository")

class ProfileRepository(BaseRepository):
    async def get_by_id(self, profile_id: str) -> Optional[dict]:
        resp = await self._exec(
            self.client.table("profiles").select("*").eq("id", profile_id).limit(1).execute(),
            op="profiles.select_by_id",
        )
        return self._first(resp)

    async def create_profile(self, data: ProfileCreate) -> dict:
        resp = await self._exec(
            self.client.table("profiles").insert(data.model_dump()).execute(),
            op="profiles.insert",
        )
        rows = self._rows(resp)
        if not rows:
            raise BackendError("profiles.insert", "no row returned")
        return rows[0]

    async def update_profile(self, profile_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        if not fields:
            return await self.get_by_id(profile_id)
        resp = await self._exec(
            self.client.table("profiles").update(fields).eq("id", profile_id).execute(),
            op="profiles.update",
        )
        rows = self._rows(resp)
        return rows[0] if rows else None
