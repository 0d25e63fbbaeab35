from __future__ import annotations
from typing import Any

from fastapi import APIRouter, Depends

from inkpress.common.deps import CurrentUser, get_current_user, require_admin
from inkpress.db.supabase import get_supabase
from .schemas import DashboardStats
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


def get_dashboard_service(client: Any = Depends(get_supabase)) -> DashboardService:
    return DashboardService(client)


@router.get("/stats", response_model=DashboardStats)
async def my_stats(
    current_user: CurrentUser = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    """Author: totals over own posts and comments."""
    return DashboardStats(**await service.author_stats(current_user.id))


@admin_router.get("/stats", response_model=DashboardStats)
async def site_stats(
    current_user: CurrentUser = Depends(require_admin()),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    """Admin: site-wide totals and the 7-day view trend."""
    return DashboardStats(**await service.site_stats())
