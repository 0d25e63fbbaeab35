from typing import Any, Dict, Optional

from .repository import ProfileRepository
from .schemas import ProfileCreate

EDITOR_ROLES = frozenset({"blogger", "admin"})

class ProfileService:
    def __init__(self, client: Any) -> None:
        self.repository = ProfileRepository(client)

    async def get_profile(self, profile_id: str) -> Optional[Dict[str, Any]]:
        return await self.repository.get_by_id(profile_id)

    async def ensure_profile(self, user_id: str, username: str, role: str = "user") -> Dict[str, Any]:
        existing = await self.repository.get_by_id(user_id)
        if existing:
            return existing
        return await self.repository.create_profile(ProfileCreate(id=user_id, username=username, role=role))

    async def get_role(self, profile_id: str) -> str:
        prof = await self.repository.get_by_id(profile_id)
        return (prof or {}).get("role") or "user"
