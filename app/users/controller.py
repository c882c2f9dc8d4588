"""Users controller: orchestration layer between router and service."""

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import evaluate_access
from app.clock import Clock
from app.exceptions import ForbiddenError, InvalidStateError
from app.models.user import User
from app.users import service
from app.users.exceptions import NoPasswordSetError, WrongPasswordError
from app.users.schemas import AccessVerdictResponse, DeactivateSelfRequest, MeResponse


def _me(user: User, clock: Clock) -> MeResponse:
    state = evaluate_access(user, clock.now())
    return MeResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=user.created_at,
        deactivated_at=user.deactivated_at,
        access=AccessVerdictResponse(
            status=state.status,
            can_write=state.can_write,
            can_react=state.can_react,
            is_admin=state.is_admin,
            banned_permanently=user.is_banned,
            banned_until=user.banned_until,
            muted_permanently=user.muted_forever,
            muted_until=user.muted_until,
        ),
    )


async def get_me(user: User, clock: Clock) -> MeResponse:
    return _me(user, clock)


async def deactivate_self(
    user: User, payload: DeactivateSelfRequest, db: AsyncSession, clock: Clock
) -> MeResponse:
    try:
        user = await service.deactivate_self(user, payload.password, db, clock)
    except NoPasswordSetError:
        raise InvalidStateError("Account has no password")
    except WrongPasswordError:
        raise ForbiddenError("Incorrect password")
    return _me(user, clock)
