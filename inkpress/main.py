"""FastAPI app: public reader, author dashboard and admin console over one backend client."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from inkpress.common.repository import BackendError
from inkpress.core.config import get_settings
from inkpress.core.logging import configure_logging
from inkpress.db.supabase import create_backend_client
from inkpress.features.auth.routes import router as auth_router
from inkpress.features.comments.endpoints import admin_router as comments_admin_router
from inkpress.features.comments.endpoints import router as comments_router
from inkpress.features.dashboard.endpoints import admin_router as stats_admin_router
from inkpress.features.dashboard.endpoints import router as stats_router
from inkpress.features.posts.endpoints import admin_router as posts_admin_router
from inkpress.features.posts.endpoints import dashboard_router as posts_dashboard_router
from inkpress.features.posts.endpoints import router as posts_router

logger = logging.getLogger("request")
_START_TIME = datetime.now(timezone.utc)


def create_app(client: Optional[Any] = None) -> FastAPI:
    """Build the app. ``client`` replaces the configured backend (tests pass an emulator)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.supabase = client if client is not None else await create_backend_client(settings)
        logging.getLogger("app").info(
            "backend_ready mode=%s latency_ms=%d", settings.backend_mode, settings.mock_latency_ms
        )
        try:
            yield
        finally:
            close = getattr(app.state.supabase, "close", None)
            if callable(close):
                close()

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
        req_id = incoming or str(uuid.uuid4())
        request.state.request_id = req_id
        logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
        response = await call_next(request)
        response.headers["X-Request-Id"] = req_id
        logger.info("request.end", extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code})
        return response

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError):
        logger.error("backend_error op=%s code=%s path=%s", exc.op, exc.code, request.url.path)
        return JSONResponse(status_code=502, content={"detail": str(exc), "code": exc.code})

    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(posts_dashboard_router)
    app.include_router(stats_router)
    app.include_router(posts_admin_router)
    app.include_router(comments_admin_router)
    app.include_router(stats_admin_router)

    @app.get("/", tags=["meta"], summary="API Root")
    async def root():
        return {"name": settings.app_name, "status": "ok", "docs": "/docs", "health": "/healthz"}

    @app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe")
    async def healthz(request: Request) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        return {
            "status": "ok",
            "backend": settings.backend_mode,
            "backend_ready": getattr(request.app.state, "supabase", None) is not None,
            "uptime_seconds": int((now - _START_TIME).total_seconds()),
        }

    return app


app = create_app()
