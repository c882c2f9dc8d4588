"""Cascading deletion of posts and comments.

Every function here only flushes; the caller's unit of work (``get_db`` for
requests) commits. A post deletion therefore lands all at once: no reader can
see the reactions gone while the post is still live, or the other way round.

Policies:
  - soft (default): reactions on the post and on all of its comments are
    removed, the comments and the post get ``deleted_at``.
  - hard (admin removal): reactions, comments and the post row are deleted.
  - comments are always soft-deleted on their own and keep their reactions;
    their replies are not touched.
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.models.comment import Comment
from app.models.enums import SubjectKind
from app.models.post import Post
from app.reactions import service as reactions
from app.subjects import ensure_author_or_admin, get_live_comment, get_live_post

logger = logging.getLogger(__name__)


async def delete_post(
    post_id: UUID,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
    *,
    hard: bool = False,
) -> None:
    post = await get_live_post(post_id, db)
    ensure_author_or_admin(post, requester)

    result = await db.execute(select(Comment.id).where(Comment.post_id == post.id))
    comment_ids = list(result.scalars().all())

    removed = await reactions.remove_reactions(SubjectKind.COMMENT, comment_ids, db)
    removed += await reactions.remove_reactions(SubjectKind.POST, [post.id], db)

    if hard:
        await db.execute(delete(Comment).where(Comment.post_id == post.id))
        await db.execute(delete(Post).where(Post.id == post.id))
    else:
        now = clock.now()
        await db.execute(
            update(Comment)
            .where(Comment.post_id == post.id, Comment.deleted_at.is_(None))
            .values(deleted_at=now)
        )
        post.deleted_at = now
    await db.flush()

    logger.info(
        "Post %s %s by %s (%d comments, %d reactions removed)",
        post_id,
        "hard-deleted" if hard else "soft-deleted",
        requester.user_id,
        len(comment_ids),
        removed,
    )


async def delete_comment(
    comment_id: UUID,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
) -> None:
    comment = await get_live_comment(comment_id, db)
    ensure_author_or_admin(comment, requester)
    comment.deleted_at = clock.now()
    await db.flush()
    logger.info("Comment %s soft-deleted by %s", comment_id, requester.user_id)


async def delete_subject(
    kind: SubjectKind,
    subject_id: UUID,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
    *,
    hard: bool = False,
) -> None:
    """Delete a post or comment. ``hard`` only applies to posts."""
    if kind is SubjectKind.POST:
        await delete_post(subject_id, requester, db, clock, hard=hard)
    elif kind is SubjectKind.COMMENT:
        await delete_comment(subject_id, requester, db, clock)
    else:
        raise ValueError(f"Unknown subject kind: {kind!r}")
