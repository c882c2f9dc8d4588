"""Posts controller: orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.exceptions import ForbiddenError, NotFoundError
from app.pagination import OffsetPage
from app.posts import service
from app.posts.schemas import PostCounts, PostDetailResponse, PostResponse, PostWriteRequest
from app.subjects import SubjectAccessDeniedError, SubjectNotFoundError


def _detail(view: service.PostView) -> PostDetailResponse:
    base = PostResponse.model_validate(view.post)
    return PostDetailResponse(
        **base.model_dump(),
        counts=PostCounts(comments=view.comments, likes=view.likes, dislikes=view.dislikes),
        viewer_reaction=view.viewer_reaction,
    )


async def list_posts(
    viewer: AccessState,
    db: AsyncSession,
    page: int,
    page_size: int,
    search: str | None,
) -> OffsetPage[PostDetailResponse]:
    views, total = await service.list_posts(
        viewer.user_id, db, page=page, page_size=page_size, search=search
    )
    return OffsetPage[PostDetailResponse].build(
        [_detail(v) for v in views], total=total, page=page, page_size=page_size
    )


async def get_post(post_id: UUID, viewer: AccessState, db: AsyncSession) -> PostDetailResponse:
    try:
        view = await service.get_post(post_id, viewer.user_id, db)
    except SubjectNotFoundError:
        raise NotFoundError("Post")
    return _detail(view)


async def create_post(
    payload: PostWriteRequest, author: AccessState, db: AsyncSession, clock: Clock
) -> PostResponse:
    post = await service.create_post(payload, author.user_id, db, clock)
    return PostResponse.model_validate(post)


async def update_post(
    post_id: UUID,
    payload: PostWriteRequest,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> PostResponse:
    try:
        post = await service.update_post(post_id, payload, requester, db, clock)
    except SubjectNotFoundError:
        raise NotFoundError("Post")
    except SubjectAccessDeniedError:
        raise ForbiddenError()
    return PostResponse.model_validate(post)
