"""Comments controller: orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.comments import service
from app.comments.exceptions import InvalidParentError
from app.comments.schemas import (
    CommentNodeResponse,
    CommentResponse,
    CommentTreeResponse,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from app.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.subjects import SubjectAccessDeniedError, SubjectNotFoundError


async def get_comment_tree(
    post_id: UUID, viewer: AccessState, db: AsyncSession
) -> CommentTreeResponse:
    try:
        roots = await service.build_comment_tree(post_id, viewer.user_id, db)
    except SubjectNotFoundError:
        raise NotFoundError("Post")
    return CommentTreeResponse(
        items=[CommentNodeResponse.model_validate(node) for node in roots]
    )


async def create_comment(
    post_id: UUID,
    payload: CreateCommentRequest,
    author: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> CommentResponse:
    try:
        comment = await service.create_comment(post_id, payload, author.user_id, db, clock)
    except SubjectNotFoundError:
        raise NotFoundError("Post")
    except InvalidParentError:
        raise InvalidStateError("Invalid parent")
    return CommentResponse.model_validate(comment)


async def update_comment(
    comment_id: UUID,
    payload: UpdateCommentRequest,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> CommentResponse:
    try:
        comment = await service.update_comment(comment_id, payload, requester, db, clock)
    except SubjectNotFoundError:
        raise NotFoundError("Comment")
    except SubjectAccessDeniedError:
        raise ForbiddenError()
    return CommentResponse.model_validate(comment)
