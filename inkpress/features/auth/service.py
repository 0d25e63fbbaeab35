"""Sign-in flows on top of the backend client's auth API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from inkpress.db.responses import ErrorCode
from inkpress.features.profiles.service import ProfileService

logger = logging.getLogger("auth.service")

_ERROR_STATUS = {
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.DUPLICATE_ACCOUNT: status.HTTP_409_CONFLICT,
}


def _raise_for(error) -> None:
    code = getattr(error, "code", None)
    raise HTTPException(_ERROR_STATUS.get(code, status.HTTP_400_BAD_REQUEST), getattr(error, "message", str(error)))


def _user_payload(user) -> Dict[str, Any]:
    return {"id": user.id, "email": user.email, "display_name": user.display_name}


class AuthService:
    def __init__(self, client: Any) -> None:
        self.client = client
        self.profiles = ProfileService(client)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        resp = await self.client.auth.sign_in_with_password({"email": email, "password": password})
        if resp.error is not None:
            logger.info("login_failed email=%s", email)
            _raise_for(resp.error)
        profile = await self.profiles.get_profile(resp.user.id)
        return {"user": _user_payload(resp.user), "profile": profile}

    async def register(self, email: str, password: str, username: Optional[str] = None) -> Dict[str, Any]:
        options = {"data": {"username": username}} if username else {}
        resp = await self.client.auth.sign_up({"email": email, "password": password, "options": options})
        if resp.error is not None:
            logger.info("register_failed email=%s code=%s", email, getattr(resp.error.code, "value", resp.error.code))
            _raise_for(resp.error)
        user = resp.user
        profile = await self.profiles.ensure_profile(user.id, username or user.display_name)
        logger.info("registered user_id=%s", user.id)
        return {"user": _user_payload(user), "profile": profile}

    async def logout(self) -> None:
        await self.client.auth.sign_out()

    async def current(self) -> Optional[Dict[str, Any]]:
        resp = await self.client.auth.get_session()
        if resp.session is None:
            return None
        user = resp.session.user
        profile = await self.profiles.get_profile(user.id)
        return {"user": _user_payload(user), "profile": profile}
