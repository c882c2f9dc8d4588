"""Request gates: bearer credential → user record → access verdict.

Routes never inspect moderation columns themselves; they depend on one of the
gates below, which all go through ``evaluate_access``.
"""

from uuid import UUID

import jwt
from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import ANONYMOUS, AccessState, AccessStatus, evaluate_access
from app.clock import Clock, get_clock
from app.config import Settings
from app.database import get_db
from app.exceptions import ForbiddenError, UnauthenticatedError
from app.models.user import User

_bearer = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return Settings()


def _decode_subject(token: str, settings: Settings) -> UUID | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError, TypeError):
        return None


async def resolve_user(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """The user behind the bearer token, or None for a missing/invalid/unknown one."""
    if credentials is None or not credentials.credentials:
        return None
    user_id = _decode_subject(credentials.credentials, settings)
    if user_id is None:
        return None
    return await db.get(User, user_id)


async def get_access_state(
    user: User | None = Depends(resolve_user),
    clock: Clock = Depends(get_clock),
) -> AccessState:
    return evaluate_access(user, clock.now())


async def get_viewer(state: AccessState = Depends(get_access_state)) -> AccessState:
    """Optional auth. Deactivated accounts read the site as anonymous visitors."""
    if state.status is AccessStatus.DEACTIVATED:
        return ANONYMOUS
    return state


async def get_current_user(state: AccessState = Depends(get_access_state)) -> AccessState:
    if state.status is AccessStatus.UNAUTHENTICATED:
        raise UnauthenticatedError()
    if state.status is AccessStatus.DEACTIVATED:
        raise ForbiddenError("Account deactivated")
    return state


async def require_contributor(state: AccessState = Depends(get_current_user)) -> AccessState:
    """Creating or editing content and reacting need an unbanned, unmuted account."""
    if not state.can_write:
        raise ForbiddenError("Account banned")
    if not state.can_react:
        raise ForbiddenError("Account muted")
    return state


async def require_admin(state: AccessState = Depends(get_current_user)) -> AccessState:
    if not state.is_admin:
        raise ForbiddenError("Admin only")
    return state


async def get_current_account(
    state: AccessState = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The active caller's own record. Served from the session identity map."""
    return await db.get(User, state.user_id)
