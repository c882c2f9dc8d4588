"""Reactions controller: orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ConflictError, InvalidStateError, NotFoundError
from app.models.enums import SubjectKind
from app.reactions import service
from app.reactions.exceptions import InvalidReactionValueError, ReactionConflictError
from app.reactions.schemas import ReactionResponse
from app.subjects import SubjectNotFoundError


async def set_reaction(
    kind: SubjectKind,
    subject_id: UUID,
    user_id: UUID,
    value: int,
    db: AsyncSession,
) -> ReactionResponse:
    try:
        effective = await service.set_reaction(kind, subject_id, user_id, value, db)
    except SubjectNotFoundError:
        raise NotFoundError(kind.value.capitalize())
    except InvalidReactionValueError as exc:
        raise InvalidStateError(str(exc))
    except ReactionConflictError:
        raise ConflictError("Reaction changed concurrently. Reload and try again.")
    counts = await service.counts_for(kind, subject_id, db)
    return ReactionResponse(value=effective, likes=counts.likes, dislikes=counts.dislikes)
