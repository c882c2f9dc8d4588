"""Posts router: create, edit, read and delete posts.

Zero business logic: delegates entirely to controllers.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock, get_clock
from app.database import get_db
from app.deletion import controller as deletion_controller
from app.deletion.schemas import DeletionResponse
from app.dependencies import get_current_user, get_viewer, require_contributor
from app.models.enums import SubjectKind
from app.pagination import MAX_PAGE_SIZE, OffsetPage
from app.posts import controller
from app.posts.schemas import PostDetailResponse, PostResponse, PostWriteRequest

router = APIRouter(prefix="/posts", tags=["Posts"])

_401 = {"description": "Not authenticated"}
_403 = {"description": "Forbidden"}
_404 = {"description": "Not found"}


@router.get(
    "",
    response_model=OffsetPage[PostDetailResponse],
    summary="List posts",
    description="Live posts, newest first. Auth is optional.",
)
async def list_posts(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    search: str | None = Query(default=None, max_length=200),
    viewer: AccessState = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> OffsetPage[PostDetailResponse]:
    return await controller.list_posts(viewer, db, page, page_size, search)


@router.get(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Get a post",
    responses={404: _404},
)
async def get_post(
    post_id: UUID,
    viewer: AccessState = Depends(get_viewer),
    db: AsyncSession = Depends(get_db),
) -> PostDetailResponse:
    return await controller.get_post(post_id, viewer, db)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    description="Banned and muted accounts are rejected with 403.",
    responses={401: _401, 403: _403},
)
async def create_post(
    payload: PostWriteRequest,
    author: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PostResponse:
    return await controller.create_post(payload, author, db, clock)


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    summary="Edit a post",
    description="Author or admin only.",
    responses={401: _401, 403: _403, 404: _404},
)
async def update_post(
    post_id: UUID,
    payload: PostWriteRequest,
    requester: AccessState = Depends(require_contributor),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> PostResponse:
    return await controller.update_post(post_id, payload, requester, db, clock)


@router.delete(
    "/{post_id}",
    response_model=DeletionResponse,
    summary="Delete a post",
    description=(
        "Soft delete, author or admin. Removes every reaction on the post and its "
        "comments and marks the comments deleted, in one transaction."
    ),
    responses={401: _401, 403: _403, 404: _404},
)
async def delete_post(
    post_id: UUID,
    requester: AccessState = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> DeletionResponse:
    return await deletion_controller.delete_subject(
        SubjectKind.POST, post_id, requester, db, clock
    )
