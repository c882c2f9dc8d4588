"""Deletion controller: shared by the author routes and the admin routes."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState
from app.clock import Clock
from app.deletion import service
from app.deletion.schemas import DeletionResponse
from app.exceptions import ForbiddenError, NotFoundError
from app.models.enums import SubjectKind
from app.subjects import SubjectAccessDeniedError, SubjectNotFoundError


async def delete_subject(
    kind: SubjectKind,
    subject_id: UUID,
    requester: AccessState,
    db: AsyncSession,
    clock: Clock,
    *,
    hard: bool = False,
) -> DeletionResponse:
    try:
        await service.delete_subject(kind, subject_id, requester, db, clock, hard=hard)
    except SubjectNotFoundError:
        raise NotFoundError(kind.value.capitalize())
    except SubjectAccessDeniedError:
        raise ForbiddenError()
    return DeletionResponse()
