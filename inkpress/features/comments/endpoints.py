from __future__ import annotations
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, status

from inkpress.common.deps import CurrentUser, get_current_user, require_admin
from inkpress.db.supabase import get_supabase
from .schemas import Comment, CommentCreate, CommentUpdate
from .service import CommentService

router = APIRouter(tags=["comments"])
admin_router = APIRouter(prefix="/admin/comments", tags=["admin"])


def get_comment_service(client: Any = Depends(get_supabase)) -> CommentService:
    return CommentService(client)


@router.get("/posts/{post_id}/comments", response_model=List[Comment])
async def list_post_comments(post_id: str, service: CommentService = Depends(get_comment_service)) -> List[Comment]:
    """Public: comments on a post, oldest first."""
    return [Comment(**c) for c in await service.list_for_post(post_id)]


@router.post("/posts/{post_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: str,
    data: CommentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> Comment:
    return Comment(**await service.add_comment(post_id, current_user.id, data.content))


@router.put("/comments/{comment_id}", response_model=Comment)
async def edit_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> Comment:
    """Comment author, blogger or admin: edit a comment."""
    return Comment(**await service.update_comment(comment_id, current_user.id, current_user.role, data.content))


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_comment(
    comment_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.delete_comment(comment_id, current_user.id, current_user.role)


@router.get("/dashboard/comments", response_model=List[Comment])
async def list_my_comments(
    current_user: CurrentUser = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
) -> List[Comment]:
    return [Comment(**c) for c in await service.list_for_user(current_user.id)]


@admin_router.get("", response_model=List[Comment])
async def list_all_comments(
    post_id: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(require_admin()),
    service: CommentService = Depends(get_comment_service),
) -> List[Comment]:
    """Admin: every comment, newest first, optionally for one post."""
    return [Comment(**c) for c in await service.list_all(post_id)]


@admin_router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def moderate_comment(
    comment_id: str,
    current_user: CurrentUser = Depends(require_admin()),
    service: CommentService = Depends(get_comment_service),
) -> None:
    await service.moderate_delete(comment_id)
