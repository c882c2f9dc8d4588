"""
Moderation domain: request orchestration layer.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import AccessState, is_blocked, is_silenced
from app.clock import Clock
from app.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from app.models.user import User
from app.moderation import service
from app.moderation.exceptions import (
    AdminImmuneError,
    NoModerationIntentError,
    TargetUserNotFoundError,
)
from app.moderation.schemas import (
    AdminUserListResponse,
    AdminUserResponse,
    ModerationCommand,
    ModerationStateResponse,
)


def _fields(user: User, now: datetime) -> dict:
    return {
        "id": user.id,
        "role": user.role,
        "is_banned": user.is_banned,
        "banned_until": user.banned_until,
        "muted_forever": user.muted_forever,
        "muted_until": user.muted_until,
        "deactivated_at": user.deactivated_at,
        "blocked": is_blocked(user, now),
        "silenced": is_silenced(user, now),
    }


def _state(user: User, now: datetime) -> ModerationStateResponse:
    return ModerationStateResponse(**_fields(user, now))


async def apply_moderation_command(
    db: AsyncSession,
    target_id: uuid.UUID,
    body: ModerationCommand,
    admin: AccessState,
    clock: Clock,
) -> ModerationStateResponse:
    try:
        user = await service.apply_moderation_command(
            db, target_id, body, actor_id=admin.user_id, clock=clock
        )
    except TargetUserNotFoundError:
        raise NotFoundError("User")
    except AdminImmuneError:
        raise ForbiddenError("Cannot moderate admin")
    except NoModerationIntentError:
        raise InvalidStateError("No moderation intent given")
    return _state(user, clock.now())


async def toggle_deactivation(
    db: AsyncSession,
    target_id: uuid.UUID,
    admin: AccessState,
    clock: Clock,
) -> ModerationStateResponse:
    try:
        user = await service.toggle_deactivation(
            db, target_id, actor_id=admin.user_id, clock=clock
        )
    except TargetUserNotFoundError:
        raise NotFoundError("User")
    except AdminImmuneError:
        raise ForbiddenError("Cannot moderate admin")
    return _state(user, clock.now())


async def list_users(
    db: AsyncSession,
    clock: Clock,
    search: str | None = None,
) -> AdminUserListResponse:
    users = await service.list_users(db, search=search)
    now = clock.now()
    return AdminUserListResponse(
        items=[
            AdminUserResponse(
                **_fields(u, now), email=u.email, name=u.name, created_at=u.created_at
            )
            for u in users
        ]
    )
