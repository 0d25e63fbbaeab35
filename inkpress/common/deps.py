"""Shared FastAPI dependencies for authentication and authorization."""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel

from inkpress.db.supabase import get_supabase
from inkpress.features.profiles.service import ProfileService

logger = logging.getLogger("auth.deps")


class CurrentUser(BaseModel):
    """Minimal user identity shared across endpoints."""
    id: str
    email: str
    username: str
    role: str


async def get_current_user(request: Request, client: Any = Depends(get_supabase)) -> CurrentUser:
    """Resolve the signed-in user from the backend session, with their profile role."""
    cached: CurrentUser | None = getattr(request.state, "current_user", None)
    if cached is not None:
        return cached

    resp = await client.auth.get_session()
    session = getattr(resp, "session", None)
    if resp.error is not None or session is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")

    user = session.user
    profile = await ProfileService(client).get_profile(user.id)
    role = (profile or {}).get("role") or "user"
    username = (profile or {}).get("username") or user.display_name
    current = CurrentUser(id=user.id, email=user.email, username=username, role=role)
    request.state.current_user = current

    logger.info(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        getattr(request.state, "request_id", None),
        request.url.path,
    )
    return current


def require_role(*roles: str) -> Callable:
    """Factory returning a dependency enforcing that the user has one of the roles."""
    normalized = {r.lower() for r in roles if r}

    async def _dep(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if normalized and current.role.lower() not in normalized:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return current

    return _dep


def require_admin() -> Callable:
    return require_role("admin")
