"""Client facade: the object the repositories receive in place of the Supabase client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from inkpress.db.auth import MockAuth
from inkpress.db.query import QueryBuilder
from inkpress.db.responses import ErrorCode, QueryResponse
from inkpress.db.store import FixtureStore

logger = logging.getLogger("mock.client")


class RPCHandle:
    """Placeholder for stored procedures; no procedure is implemented."""

    def __init__(self, name: str, params: Optional[Dict[str, Any]], *, latency: float, strict: bool) -> None:
        self.name = name
        self.params = dict(params or {})
        self._latency = latency
        self._strict = strict

    async def execute(self) -> QueryResponse:
        await asyncio.sleep(self._latency)
        if self._strict:
            return QueryResponse.failure(ErrorCode.UNIMPLEMENTED, f"rpc '{self.name}' is not implemented")
        logger.warning("rpc %s is not implemented by the emulator; returning empty result", self.name)
        return QueryResponse(data=None, error=None, count=None)


class MockSupabaseClient:
    """In-process stand-in for the async Supabase client.

    Build one per process and share it: the store and the session live on
    the instance.
    """

    def __init__(
        self,
        store: Optional[FixtureStore] = None,
        *,
        latency: float = 0.5,
        default_user_email: Optional[str] = None,
        rpc_strict: bool = False,
    ) -> None:
        self.store = store if store is not None else FixtureStore()
        self.latency = max(0.0, float(latency))
        self.rpc_strict = rpc_strict
        self.auth = MockAuth(self.store, latency=self.latency, default_user_email=default_user_email)

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(name, self.store, latency=self.latency)

    def from_(self, name: str) -> QueryBuilder:
        return self.table(name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> RPCHandle:
        return RPCHandle(name, params, latency=self.latency, strict=self.rpc_strict)

    def close(self) -> None:
        self.auth.close()
