"""
Moderation domain: admin routes.

Routes:
  GET    /api/v1/admin/users                       List users with moderation state
  PATCH  /api/v1/admin/users/{user_id}             Apply a ban/mute command
  PATCH  /api/v1/admin/users/{user_id}/deactivate  Toggle account deactivation
  DELETE /api/v1/admin/posts/{post_id}             Hard-delete a post and its thread
  DELETE /api/v1/admin/comments/{comment_id}       Soft-delete a comment

Zero business logic. Zero DB queries.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock, get_clock
from app.database import get_db
from app.deletion import controller as deletion_controller
from app.deletion.schemas import DeletionResponse
from app.dependencies import require_admin
from app.models.enums import SubjectKind
from app.moderation import controller as ctrl
from app.moderation.schemas import (
    AdminUserListResponse,
    ModerationCommand,
    ModerationStateResponse,
)

router = APIRouter(prefix="/admin", tags=["admin"])

_ADMIN_ERRORS = {
    401: {"description": "Not authenticated"},
    403: {"description": "Not an admin, or target is an admin"},
    404: {"description": "Target not found"},
}


@router.get(
    "/users",
    response_model=AdminUserListResponse,
    summary="[Admin] List users with their moderation state",
)
async def list_users(
    search: str | None = Query(default=None, max_length=100),
    admin: AccessState = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> AdminUserListResponse:
    return await ctrl.list_users(db, clock, search=search)


@router.patch(
    "/users/{user_id}",
    response_model=ModerationStateResponse,
    summary="[Admin] Ban, mute, unban or unmute a user",
    description=(
        "Within each group the strongest intent wins: unban over ban_permanent "
        "over ban_hours, and likewise for mute. Admin accounts cannot be moderated."
    ),
    responses={**_ADMIN_ERRORS, 422: {"description": "No intent given"}},
)
async def moderate_user(
    user_id: uuid.UUID,
    body: ModerationCommand,
    admin: AccessState = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ModerationStateResponse:
    return await ctrl.apply_moderation_command(db, user_id, body, admin, clock)


@router.patch(
    "/users/{user_id}/deactivate",
    response_model=ModerationStateResponse,
    summary="[Admin] Toggle account deactivation",
    responses=_ADMIN_ERRORS,
)
async def toggle_deactivation(
    user_id: uuid.UUID,
    admin: AccessState = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ModerationStateResponse:
    return await ctrl.toggle_deactivation(db, user_id, admin, clock)


@router.delete(
    "/posts/{post_id}",
    response_model=DeletionResponse,
    summary="[Admin] Remove a post permanently",
    description="Deletes the post row, its comments and every reaction on them.",
    responses=_ADMIN_ERRORS,
)
async def remove_post(
    post_id: uuid.UUID,
    admin: AccessState = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DeletionResponse:
    return await deletion_controller.delete_subject(
        SubjectKind.POST, post_id, admin, db, clock, hard=True
    )


@router.delete(
    "/comments/{comment_id}",
    response_model=DeletionResponse,
    summary="[Admin] Remove a comment",
    responses=_ADMIN_ERRORS,
)
async def remove_comment(
    comment_id: uuid.UUID,
    admin: AccessState = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DeletionResponse:
    return await deletion_controller.delete_subject(
        SubjectKind.COMMENT, comment_id, admin, db, clock
    )
