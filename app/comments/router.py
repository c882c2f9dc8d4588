"""Comments router: threaded comments on posts.

Zero business logic: delegates entirely to controllers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock, get_clock
from app.comments import controller
from app.comments.schemas import (
    CommentResponse,
    CommentTreeResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from app.database import get_db
from app.deletion import controller as deletion_controller
from app.deletion.schemas import DeletionResponse
from app.dependencies import get_current_user, get_viewer, require_contributor
from app.models.enums import SubjectKind

router = APIRouter(tags=["Comments"])

_401 = {"description": "Not authenticated"}
_403 = {"description": "Forbidden"}
_404 = {"description": "Not found"}
_422 = {"description": "Invalid payload or parent"}


@router.get(
    "/posts/{post_id}/comments",
    response_model=CommentTreeResponse,
    summary="Comment thread of a post",
    description=(
        "Live comments as a forest ordered by creation time. Auth is optional; "
        "with a token each node carries the caller's own reaction."
    ),
    responses={404: _404},
)
async def get_comment_tree(
    post_id: UUID,
    viewer: AccessState = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> CommentTreeResponse:
    return await controller.get_comment_tree(post_id, viewer, db)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post or reply to a comment",
    responses={401: _401, 403: _403, 404: _404, 422: _422},
)
async def create_comment(
    post_id: UUID,
    payload: CreateCommentRequest,
    author: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CommentResponse:
    return await controller.create_comment(post_id, payload, author, db, clock)


@router.put(
    "/comments/{comment_id}",
    response_model=CommentResponse,
    summary="Edit a comment",
    description="Author or admin only.",
    responses={401: _401, 403: _403, 404: _404},
)
async def update_comment(
    comment_id: UUID,
    payload: UpdateCommentRequest,
    requester: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> CommentResponse:
    return await controller.update_comment(comment_id, payload, requester, db, clock)


@router.delete(
    "/comments/{comment_id}",
    response_model=DeletionResponse,
    summary="Delete a comment",
    description=(
        "Soft delete, author or admin. Replies stay visible and move to the top level."
    ),
    responses={401: _401, 403: _403, 404: _404},
)
async def delete_comment(
    comment_id: UUID,
    requester: AccessState = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DeletionResponse:
    return await deletion_controller.delete_subject(
        SubjectKind.COMMENT, comment_id, requester, db, clock
    )
