from __future__ import annotations
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status

from inkpress.common.deps import CurrentUser, get_current_user, require_admin
from inkpress.db.supabase import get_supabase
from .schemas import Post, PostCreate, PostPage, PostUpdate
from .service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])
dashboard_router = APIRouter(prefix="/dashboard/posts", tags=["dashboard"])
admin_router = APIRouter(prefix="/admin/posts", tags=["admin"])


def get_post_service(client: Any = Depends(get_supabase)) -> PostService:
    return PostService(client)


@router.get("", response_model=PostPage)
async def list_posts(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=50),
    service: PostService = Depends(get_post_service),
) -> PostPage:
    """Public: published posts, newest first."""
    return PostPage(**await service.list_published(page, per_page))


@router.get("/{post_id}", response_model=Post)
async def read_post(post_id: str, service: PostService = Depends(get_post_service)) -> Post:
    """Public: one published post with its author; counts a view."""
    return Post(**await service.get_published(post_id))


@dashboard_router.get("", response_model=List[Post])
async def list_my_posts(
    status_filter: str = Query("all", alias="status"),
    current_user: CurrentUser = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> List[Post]:
    """Author: own posts, optionally filtered by status."""
    return [Post(**p) for p in await service.list_for_author(current_user.id, status_filter)]


@dashboard_router.get("/{post_id}", response_model=Post)
async def read_my_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Post:
    return Post(**await service.get_for_editing(post_id, current_user.id))


@dashboard_router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(
    data: PostCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Post:
    """Author: create a draft or publish directly."""
    return Post(**await service.create_post(current_user.id, data))


@dashboard_router.put("/{post_id}", response_model=Post)
async def update_post(
    post_id: str,
    data: PostUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> Post:
    return Post(**await service.update_post(post_id, current_user.id, data))


@dashboard_router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_post(
    post_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: PostService = Depends(get_post_service),
) -> None:
    await service.delete_post(post_id, author_id=current_user.id)


@admin_router.get("", response_model=List[Post])
async def list_all_posts(
    status_filter: str = Query("all", alias="status"),
    current_user: CurrentUser = Depends(require_admin()),
    service: PostService = Depends(get_post_service),
) -> List[Post]:
    """Admin: every post from every author."""
    return [Post(**p) for p in await service.list_all(status_filter)]


@admin_router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_any_post(
    post_id: str,
    current_user: CurrentUser = Depends(require_admin()),
    service: PostService = Depends(get_post_service),
) -> None:
    await service.delete_post(post_id)


@admin_router.get("/{post_id}", response_model=Post)
async def read_any_post(
    post_id: str,
    current_user: CurrentUser = Depends(require_admin()),
    service: PostService = Depends(get_post_service),
) -> Post:
    return Post(**await service.get_for_editing(post_id))


@admin_router.post("", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post_as_admin(
    data: PostCreate,
    current_user: CurrentUser = Depends(require_admin()),
    service: PostService = Depends(get_post_service),
) -> Post:
    return Post(**await service.create_post(current_user.id, data))


@admin_router.put("/{post_id}", response_model=Post)
async def update_any_post(
    post_id: str,
    data: PostUpdate,
    current_user: CurrentUser = Depends(require_admin()),
    service: PostService = Depends(get_post_service),
) -> Post:
    """Admin: edit any author's post; the author stays unchanged."""
    return Post(**await service.update_post(post_id, None, data))
