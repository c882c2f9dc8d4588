"""Posts service: pure business logic, no FastAPI imports."""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.models.comment import Comment
from app.models.enums import SubjectKind
from app.models.post import Post
from app.pagination import LIKE_ESCAPE, contains_pattern, offset_for
from app.posts.schemas import PostWriteRequest
from app.reactions import service as reactions
from app.subjects import ensure_author_or_admin, get_live_post


@dataclass
class PostView:
    post: Post
    comments: int
    likes: int
    dislikes: int
    viewer_reaction: int


async def create_post(
    payload: PostWriteRequest, author_id: UUID, db: AsyncSession, clock: Clock
) -> Post:
    now = clock.now()
    post = Post(
        author_id=author_id,
        title=payload.title,
        content_md=payload.content_md,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    await db.flush()
    return post


async def update_post(
    post_id: UUID,
    payload: PostWriteRequest,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> Post:
    post = await get_live_post(post_id, db)
    ensure_author_or_admin(post, requester)
    post.title = payload.title
    post.content_md = payload.content_md
    post.updated_at = clock.now()
    await db.flush()
    return post


async def _live_comment_counts(post_ids: list[UUID], db: AsyncSession) -> dict[UUID, int]:
    if not post_ids:
        return {}
    result = await db.execute(
        select(Comment.post_id, func.count())
        .where(Comment.post_id.in_(post_ids), Comment.deleted_at.is_(None))
        .group_by(Comment.post_id)
    )
    return dict(result.all())


async def _annotate(posts: list[Post], viewer_id: UUID | None, db: AsyncSession) -> list[PostView]:
    ids = [p.id for p in posts]
    comment_counts = await _live_comment_counts(ids, db)
    counts = await reactions.counts_for_many(SubjectKind.POST, ids, db)
    mine = await reactions.viewer_reactions_many(SubjectKind.POST, ids, viewer_id, db)
    views = []
    for post in posts:
        tally = counts.get(post.id, reactions.ReactionCounts())
        views.append(
            PostView(
                post=post,
                comments=comment_counts.get(post.id, 0),
                likes=tally.likes,
                dislikes=tally.dislikes,
                viewer_reaction=mine.get(post.id, 0),
            )
        )
    return views


async def get_post(post_id: UUID, viewer_id: UUID | None, db: AsyncSession) -> PostView:
    post = await get_live_post(post_id, db)
    views = await _annotate([post], viewer_id, db)
    return views[0]


async def list_posts(
    viewer_id: UUID | None,
    db: AsyncSession,
    page: int = 1,
    page_size: int = 10,
    search: str | None = None,
) -> tuple[list[PostView], int]:
    """Live posts, newest first, optionally filtered by a title/body substring."""
    base = select(Post).where(Post.deleted_at.is_(None))
    if search:
        pattern = contains_pattern(search)
        base = base.where(
            or_(
                Post.title.ilike(pattern, escape=LIKE_ESCAPE),
                Post.content_md.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    total_result = await db.execute(select(func.count()).select_from(base.subquery()))
    total = total_result.scalar_one()
    result = await db.execute(
        base.order_by(Post.created_at.desc(), Post.id.desc())
        .offset(offset_for(page, page_size))
        .limit(page_size)
    )
    posts = list(result.scalars().all())
    return await _annotate(posts, viewer_id, db), total
