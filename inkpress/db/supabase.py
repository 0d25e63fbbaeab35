"""Backend client factory (single entry point).

``BACKEND_MODE=mock`` (default) builds the in-process emulator;
``BACKEND_MODE=supabase`` connects to a real project. The client is built
once at startup and injected; nothing here caches a module-level instance.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Request
from supabase import AuthError, create_async_client

from inkpress.core.config import Settings, get_settings
from inkpress.db.client import MockSupabaseClient
from inkpress.db.responses import AuthResponse, AuthUser, ErrorCode, Session
from inkpress.db.store import FixtureStore

logger = logging.getLogger("supabase.client")

_DUPLICATE_CODES = {"user_already_exists", "email_exists"}


def _auth_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    meta = dict(getattr(user, "user_metadata", None) or {})
    email = getattr(user, "email", None) or ""
    name = meta.get("username") or meta.get("display_name") or email.split("@", 1)[0]
    return AuthUser(id=str(user.id), email=email, display_name=name, user_metadata=meta)


def _signed_in(user: Any, session: Any) -> AuthResponse:
    auth_user = _auth_user(user)
    if auth_user is None and session is not None:
        auth_user = _auth_user(getattr(session, "user", None))
    return AuthResponse(
        user=auth_user,
        session=Session(user=auth_user) if session is not None and auth_user is not None else None,
        error=None,
    )


def _failure(exc: AuthError) -> AuthResponse:
    code = getattr(exc, "code", None)
    error = ErrorCode.DUPLICATE_ACCOUNT if code in _DUPLICATE_CODES else ErrorCode.INVALID_CREDENTIALS
    return AuthResponse.failure(error, getattr(exc, "message", None) or str(exc))


class SupabaseAuth:
    """Wraps the hosted auth client so it answers with ``AuthResponse`` envelopes."""

    def __init__(self, auth: Any) -> None:
        self._auth = auth

    async def get_session(self) -> AuthResponse:
        try:
            session = await self._auth.get_session()
        except AuthError as exc:
            logger.warning("get_session failed: %s", exc)
            return _failure(exc)
        if session is None:
            return AuthResponse()
        return _signed_in(session.user, session)

    async def get_user(self) -> AuthResponse:
        try:
            resp = await self._auth.get_user()
        except AuthError as exc:
            return _failure(exc)
        user = getattr(resp, "user", None)
        return AuthResponse(user=_auth_user(user)) if user is not None else AuthResponse()

    async def sign_in_with_password(self, credentials: Dict[str, Any]) -> AuthResponse:
        try:
            resp = await self._auth.sign_in_with_password(credentials)
        except AuthError as exc:
            logger.info("sign-in rejected for %s code=%s", credentials.get("email"), getattr(exc, "code", None))
            return _failure(exc)
        return _signed_in(resp.user, resp.session)

    async def sign_up(self, credentials: Dict[str, Any]) -> AuthResponse:
        try:
            resp = await self._auth.sign_up(credentials)
        except AuthError as exc:
            logger.info("sign-up rejected for %s code=%s", credentials.get("email"), getattr(exc, "code", None))
            return _failure(exc)
        return _signed_in(resp.user, resp.session)

    async def sign_out(self) -> AuthResponse:
        try:
            await self._auth.sign_out()
        except AuthError as exc:
            return _failure(exc)
        return AuthResponse()

    def on_auth_state_change(self, listener: Callable) -> Any:
        return self._auth.on_auth_state_change(listener)


class SupabaseBackend:
    """The hosted async client with its auth surface adapted."""

    def __init__(self, client: Any) -> None:
        self.client = client
        self.auth = SupabaseAuth(client.auth)

    def table(self, name: str) -> Any:
        return self.client.table(name)

    def from_(self, name: str) -> Any:
        return self.client.table(name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.client.rpc(name, params or {})


async def create_backend_client(settings: Optional[Settings] = None, store: Optional[FixtureStore] = None) -> Any:
    settings = settings or get_settings()
    if settings.use_mock_backend:
        return MockSupabaseClient(
            store,
            latency=settings.mock_latency,
            default_user_email=settings.mock_default_user_email,
            rpc_strict=settings.mock_rpc_strict,
        )
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError("SUPABASE_URL / SUPABASE_KEY not configured")
    try:
        client = await create_async_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:  # pragma: no cover (network/init failure)
        raise RuntimeError("Could not create Supabase async client") from exc
    return SupabaseBackend(client)


def get_supabase(request: Request) -> Any:
    """FastAPI dependency returning the client built during app startup."""
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        raise RuntimeError("Backend client not initialised")
    return client


__all__ = ["SupabaseAuth", "SupabaseBackend", "create_backend_client", "get_supabase"]
