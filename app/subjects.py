"""Lookups shared by every domain that acts on a post or comment."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.models.comment import Comment
from app.models.enums import SubjectKind
from app.models.post import Post

SUBJECT_MODELS: dict[SubjectKind, type[Post] | type[Comment]] = {
    SubjectKind.POST: Post,
    SubjectKind.COMMENT: Comment,
}


class SubjectNotFoundError(Exception):
    def __init__(self, kind: SubjectKind, subject_id) -> None:
        self.kind = kind
        self.subject_id = subject_id
        super().__init__(f"{kind.value.capitalize()} {subject_id} not found")


class SubjectAccessDeniedError(Exception):
    """Requester is neither the author nor an admin."""


async def get_live_subject(
    kind: SubjectKind, subject_id: UUID, db: AsyncSession
) -> Post | Comment:
    """Load a post or comment, treating soft-deleted rows as missing."""
    subject = await db.get(SUBJECT_MODELS[kind], subject_id)
    if subject is None or subject.deleted_at is not None:
        raise SubjectNotFoundError(kind, subject_id)
    return subject


async def get_live_post(post_id: UUID, db: AsyncSession) -> Post:
    return await get_live_subject(SubjectKind.POST, post_id, db)


async def get_live_comment(comment_id: UUID, db: AsyncSession) -> Comment:
    return await get_live_subject(SubjectKind.COMMENT, comment_id, db)


def ensure_author_or_admin(subject: Post | Comment, requester: AccessState) -> None:
    if subject.author_id == requester.user_id or requester.is_admin:
        return
    raise SubjectAccessDeniedError()
