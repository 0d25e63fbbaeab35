"""Shared data-access plumbing for feature repositories."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional

from supabase import PostgrestAPIError

from inkpress.core.config import get_settings

logger = logging.getLogger("common.repository")


class BackendError(RuntimeError):
    """A backend call returned an error envelope, raised, or timed out."""

    def __init__(self, op: str, message: str, code: Optional[str] = None) -> None:
        self.op = op
        self.code = code
        super().__init__(f"{op} failed: {message}")


class BaseRepository:
    def __init__(self, client: Any) -> None:
        self.client = client

    async def _exec(self, awaitable, op: str):
        timeout = get_settings().supabase_query_timeout
        t0 = time.perf_counter()
        try:
            resp = await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError:
            raise BackendError(op, f"timed out after {timeout}s")
        except PostgrestAPIError as exc:
            # the hosted client raises instead of returning an error envelope
            logger.error("supabase_%s_error code=%s message=%s", op, exc.code, exc.message)
            raise BackendError(op, exc.message or str(exc), exc.code)
        ms = int((time.perf_counter() - t0) * 1000)
        if ms > 50:
            logger.info("supabase_%s_ms=%d", op, ms)
        error = getattr(resp, "error", None)
        if error is not None:
            code = getattr(error, "code", None)
            message = getattr(error, "message", None) or str(error)
            logger.error("supabase_%s_error code=%s message=%s", op, getattr(code, "value", code), message)
            raise BackendError(op, message, getattr(code, "value", code))
        return resp

    @staticmethod
    def _rows(resp) -> list:
        data = getattr(resp, "data", None)
        if not data:
            return []
        return data if isinstance(data, list) else [data]

    @classmethod
    def _first(cls, resp) -> Optional[dict]:
        rows = cls._rows(resp)
        return rows[0] if rows else None
