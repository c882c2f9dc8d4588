"""Users router: the caller's own account.

Zero business logic: delegates entirely to controllers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.clock import Clock, get_clock
from app.database import get_db
from app.dependencies import get_current_account
from app.models.user import User
from app.users import controller
from app.users.schemas import DeactivateSelfRequest, MeResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Current user and access verdict",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Account deactivated"},
    },
)
async def get_me(
    user: User = Depends(get_current_account),
    clock: Clock = Depends(get_clock),
) -> MeResponse:
    return await controller.get_me(user, clock)


@router.delete(
    "/me",
    response_model=MeResponse,
    summary="Deactivate own account",
    description="Requires the current password. Only an admin can reactivate.",
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Wrong password or already deactivated"},
        422: {"description": "Account has no password"},
    },
)
async def deactivate_me(
    payload: DeactivateSelfRequest,
    user: User = Depends(get_current_account),
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> MeResponse:
    return await controller.deactivate_self(user, payload, db, clock)
