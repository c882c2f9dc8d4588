"""
Moderation domain: pure business logic (zero FastAPI imports).

A command is resolved per group (ban, mute) by precedence and written to the
target's moderation columns:

  ban:   unban > ban_permanent > ban_hours
  mute:  unmute > mute_permanent > mute_hours

Permanent and timed restrictions live in separate columns, so applying one
resets the other. Lower-precedence intents in the same group are dropped
with a warning, not rejected.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.access.evaluator import is_admin
from app.clock import Clock
from app.models.user import User
from app.pagination import LIKE_ESCAPE, contains_pattern
from app.moderation.exceptions import (
    AdminImmuneError,
    NoModerationIntentError,
    TargetUserNotFoundError,
)
from app.moderation.schemas import ModerationCommand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Restriction:
    """Resolved outcome for one group: (permanent flag, expiry)."""

    permanent: bool
    until: datetime | None


_LIFTED = Restriction(permanent=False, until=None)


def _resolve_group(
    group: str,
    *,
    lift: bool,
    permanent: bool,
    hours: int | None,
    now: datetime,
    target_id: uuid.UUID,
) -> Restriction | None:
    """Pick the winning intent of one group, or None when the group is untouched."""
    requested = [
        name
        for name, present in (
            ("lift", lift),
            ("permanent", permanent),
            ("hours", hours is not None),
        )
        if present
    ]
    if not requested:
        return None
    if len(requested) > 1:
        logger.warning(
            "Conflicting %s intents for user %s: %s; applying %s",
            group,
            target_id,
            ", ".join(requested),
            requested[0],
        )

    if lift:
        return _LIFTED
    if permanent:
        return Restriction(permanent=True, until=None)
    return Restriction(permanent=False, until=now + timedelta(hours=hours))


async def get_target(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise TargetUserNotFoundError(user_id)
    return user


def ensure_moderatable(target: User) -> None:
    if is_admin(target.role):
        raise AdminImmuneError()


async def apply_moderation_command(
    db: AsyncSession,
    target_id: uuid.UUID,
    command: ModerationCommand,
    *,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    """
    Apply a ban/mute command to a non-admin user.

    Guards: target exists, target is not an admin, command carries an intent.
    Happy path last.
    """
    target = await get_target(db, target_id)
    ensure_moderatable(target)
    if not (command.touches_ban or command.touches_mute):
        raise NoModerationIntentError()

    now = clock.now()
    ban = _resolve_group(
        "ban",
        lift=command.unban,
        permanent=command.ban_permanent,
        hours=command.ban_hours,
        now=now,
        target_id=target_id,
    )
    mute = _resolve_group(
        "mute",
        lift=command.unmute,
        permanent=command.mute_permanent,
        hours=command.mute_hours,
        now=now,
        target_id=target_id,
    )

    if ban is not None:
        target.is_banned = ban.permanent
        target.banned_until = ban.until
    if mute is not None:
        target.muted_forever = mute.permanent
        target.muted_until = mute.until
    await db.flush()

    logger.info(
        "Moderation by %s on user %s: ban=%s mute=%s",
        actor_id,
        target_id,
        ban,
        mute,
    )
    return target


async def ban_user(
    db: AsyncSession,
    target_id: uuid.UUID,
    *,
    hours: int | None = None,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    """Permanent ban when ``hours`` is None, timed ban otherwise."""
    command = ModerationCommand(ban_permanent=hours is None, ban_hours=hours)
    return await apply_moderation_command(db, target_id, command, actor_id=actor_id, clock=clock)


async def unban_user(
    db: AsyncSession, target_id: uuid.UUID, *, actor_id: uuid.UUID | None, clock: Clock
) -> User:
    command = ModerationCommand(unban=True)
    return await apply_moderation_command(db, target_id, command, actor_id=actor_id, clock=clock)


async def mute_user(
    db: AsyncSession,
    target_id: uuid.UUID,
    *,
    hours: int | None = None,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    command = ModerationCommand(mute_permanent=hours is None, mute_hours=hours)
    return await apply_moderation_command(db, target_id, command, actor_id=actor_id, clock=clock)


async def unmute_user(
    db: AsyncSession, target_id: uuid.UUID, *, actor_id: uuid.UUID | None, clock: Clock
) -> User:
    command = ModerationCommand(unmute=True)
    return await apply_moderation_command(db, target_id, command, actor_id=actor_id, clock=clock)


async def set_deactivated(
    db: AsyncSession,
    target_id: uuid.UUID,
    deactivated: bool,
    *,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    """Deactivate or reactivate an account. Repeating either is a no-op."""
    target = await get_target(db, target_id)
    ensure_moderatable(target)
    if deactivated and target.deactivated_at is None:
        target.deactivated_at = clock.now()
    elif not deactivated:
        target.deactivated_at = None
    await db.flush()
    logger.info(
        "User %s %s by %s",
        target_id,
        "deactivated" if deactivated else "reactivated",
        actor_id,
    )
    return target


async def deactivate_user(
    db: AsyncSession,
    target_id: uuid.UUID,
    *,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    return await set_deactivated(db, target_id, True, actor_id=actor_id, clock=clock)


async def reactivate_user(
    db: AsyncSession,
    target_id: uuid.UUID,
    *,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    return await set_deactivated(db, target_id, False, actor_id=actor_id, clock=clock)


async def toggle_deactivation(
    db: AsyncSession,
    target_id: uuid.UUID,
    *,
    actor_id: uuid.UUID | None,
    clock: Clock,
) -> User:
    target = await get_target(db, target_id)
    return await set_deactivated(
        db,
        target_id,
        target.deactivated_at is None,
        actor_id=actor_id,
        clock=clock,
    )


async def list_users(
    db: AsyncSession,
    *,
    search: str | None = None,
) -> list[User]:
    """All users, oldest first, optionally filtered by name or email."""
    query = sa.select(User)
    if search:
        pattern = contains_pattern(search)
        query = query.where(
            sa.or_(
                User.name.ilike(pattern, escape=LIKE_ESCAPE),
                User.email.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )
    result = await db.execute(query.order_by(User.created_at.asc(), User.id.asc()))
    return list(result.scalars().all())
