"""Reaction ledger: pure business logic, no FastAPI imports.

One ledger serves posts and comments; the subject kind is part of the key.
Each (kind, subject, user) holds at most one row, and ``set_reaction`` is a
toggle:

  - no row            → insert it            → effective value = requested
  - same value stored → delete it (toggle-off) → effective value = 0
  - opposite value    → update it in place   → effective value = requested

The check-then-write runs against the unique constraint: the insert is an
``INSERT … ON CONFLICT DO NOTHING`` and, when a row was already there, that row
is locked with ``SELECT … FOR UPDATE`` before it is deleted or flipped.
Concurrent toggles on the same pair therefore queue up in the database.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ReactionValue, SubjectKind
from app.models.reaction import Reaction
from app.reactions.exceptions import InvalidReactionValueError, ReactionConflictError
from app.subjects import get_live_subject

_UNIQUE_KEY = ("subject_type", "subject_id", "user_id")


@dataclass(frozen=True)
class ReactionCounts:
    likes: int = 0
    dislikes: int = 0


def _coerce_value(value: int) -> ReactionValue:
    # bool is an int subclass; True must not pass as a like
    if isinstance(value, bool):
        raise InvalidReactionValueError(value)
    try:
        return ReactionValue(value)
    except ValueError:
        raise InvalidReactionValueError(value) from None


def _insert_ignoring_duplicates(db: AsyncSession, values: dict):
    dialect = db.get_bind().dialect.name
    insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
    return (
        insert(Reaction.__table__)
        .values(**values)
        .on_conflict_do_nothing(index_elements=list(_UNIQUE_KEY))
    )


def _pair(kind: SubjectKind, subject_id: UUID, user_id: UUID):
    return (
        Reaction.subject_type == kind,
        Reaction.subject_id == subject_id,
        Reaction.user_id == user_id,
    )


async def set_reaction(
    kind: SubjectKind,
    subject_id: UUID,
    user_id: UUID,
    value: int,
    db: AsyncSession,
) -> int:
    """Apply one toggle and return the caller's effective value (1, -1 or 0)."""
    requested = _coerce_value(value)
    await get_live_subject(kind, subject_id, db)

    inserted = await db.execute(
        _insert_ignoring_duplicates(
            db,
            {
                "subject_type": kind,
                "subject_id": subject_id,
                "user_id": user_id,
                "value": int(requested),
            },
        )
    )
    if inserted.rowcount == 1:
        return int(requested)

    result = await db.execute(
        select(Reaction.id, Reaction.value)
        .where(*_pair(kind, subject_id, user_id))
        .with_for_update()
    )
    existing = result.one_or_none()
    if existing is None:
        # The conflicting row was toggled off by a concurrent request after our insert lost.
        raise ReactionConflictError()

    if existing.value == int(requested):
        await db.execute(delete(Reaction).where(Reaction.id == existing.id))
        return 0

    await db.execute(
        update(Reaction).where(Reaction.id == existing.id).values(value=int(requested))
    )
    return int(requested)


async def counts_for_many(
    kind: SubjectKind, subject_ids: list[UUID], db: AsyncSession
) -> dict[UUID, ReactionCounts]:
    """Like/dislike totals per subject. Subjects without reactions are omitted."""
    if not subject_ids:
        return {}
    result = await db.execute(
        select(Reaction.subject_id, Reaction.value, func.count())
        .where(Reaction.subject_type == kind, Reaction.subject_id.in_(subject_ids))
        .group_by(Reaction.subject_id, Reaction.value)
    )
    tallies: dict[UUID, dict[int, int]] = {}
    for subject_id, value, count in result.all():
        tallies.setdefault(subject_id, {})[value] = count
    return {
        subject_id: ReactionCounts(
            likes=by_value.get(ReactionValue.LIKE.value, 0),
            dislikes=by_value.get(ReactionValue.DISLIKE.value, 0),
        )
        for subject_id, by_value in tallies.items()
    }


async def counts_for(kind: SubjectKind, subject_id: UUID, db: AsyncSession) -> ReactionCounts:
    counts = await counts_for_many(kind, [subject_id], db)
    return counts.get(subject_id, ReactionCounts())


async def viewer_reactions_many(
    kind: SubjectKind,
    subject_ids: list[UUID],
    user_id: UUID | None,
    db: AsyncSession,
) -> dict[UUID, int]:
    if user_id is None or not subject_ids:
        return {}
    result = await db.execute(
        select(Reaction.subject_id, Reaction.value).where(
            Reaction.subject_type == kind,
            Reaction.subject_id.in_(subject_ids),
            Reaction.user_id == user_id,
        )
    )
    return {subject_id: value for subject_id, value in result.all()}


async def viewer_reaction(
    kind: SubjectKind,
    subject_id: UUID,
    user_id: UUID | None,
    db: AsyncSession,
) -> int:
    """The viewer's own value on a subject; 0 when absent or anonymous."""
    values = await viewer_reactions_many(kind, [subject_id], user_id, db)
    return values.get(subject_id, 0)


async def remove_reactions(
    kind: SubjectKind, subject_ids: list[UUID], db: AsyncSession
) -> int:
    """Delete every reaction on the given subjects. Returns the number of rows removed."""
    if not subject_ids:
        return 0
    result = await db.execute(
        delete(Reaction).where(
            Reaction.subject_type == kind, Reaction.subject_id.in_(subject_ids)
        )
    )
    return result.rowcount
