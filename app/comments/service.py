"""Comments service: pure business logic, no FastAPI imports."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.comments.exceptions import InvalidParentError
from app.comments.schemas import CreateCommentRequest, UpdateCommentRequest
from app.comments.tree import CommentNode, assemble_forest
from app.models.comment import Comment
from app.models.enums import SubjectKind
from app.reactions import service as reactions
from app.subjects import ensure_author_or_admin, get_live_comment, get_live_post


async def list_live_comments(post_id: UUID, db: AsyncSession) -> list[Comment]:
    result = await db.execute(
        select(Comment)
        .where(Comment.post_id == post_id, Comment.deleted_at.is_(None))
        .order_by(Comment.created_at.asc(), Comment.id.asc())
    )
    return list(result.scalars().all())


async def build_comment_tree(
    post_id: UUID,
    viewer_id: UUID | None,
    db: AsyncSession,
) -> list[CommentNode]:
    """Live comments of a live post as a forest, annotated with reaction data.

    Raises SubjectNotFoundError when the post is missing or soft-deleted.
    """
    await get_live_post(post_id, db)
    comments = await list_live_comments(post_id, db)
    ids = [c.id for c in comments]
    counts = await reactions.counts_for_many(SubjectKind.COMMENT, ids, db)
    mine = await reactions.viewer_reactions_many(SubjectKind.COMMENT, ids, viewer_id, db)

    nodes = []
    for c in comments:
        tally = counts.get(c.id, reactions.ReactionCounts())
        nodes.append(
            CommentNode(
                id=c.id,
                post_id=c.post_id,
                author_id=c.author_id,
                parent_id=c.parent_id,
                content_md=c.content_md,
                created_at=c.created_at,
                updated_at=c.updated_at,
                likes=tally.likes,
                dislikes=tally.dislikes,
                viewer_reaction=mine.get(c.id, 0),
            )
        )
    return assemble_forest(nodes)


async def create_comment(
    post_id: UUID,
    payload: CreateCommentRequest,
    author_id: UUID,
    db: AsyncSession,
    clock: Clock,
) -> Comment:
    """Create a top-level comment or a reply.

    The parent must be a live comment of the same post at this moment; that
    check is not repeated if the parent is deleted later.
    """
    post = await get_live_post(post_id, db)
    if payload.parent_id is not None:
        parent = await db.get(Comment, payload.parent_id)
        if parent is None or parent.post_id != post.id or parent.deleted_at is not None:
            raise InvalidParentError(payload.parent_id)

    now = clock.now()
    comment = Comment(
        post_id=post.id,
        author_id=author_id,
        parent_id=payload.parent_id,
        content_md=payload.content_md,
        created_at=now,
        updated_at=now,
    )
    db.add(comment)
    await db.flush()
    return comment


async def update_comment(
    comment_id: UUID,
    payload: UpdateCommentRequest,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> Comment:
    comment = await get_live_comment(comment_id, db)
    ensure_author_or_admin(comment, requester)
    comment.content_md = payload.content_md
    comment.updated_at = clock.now()
    await db.flush()
    return comment
