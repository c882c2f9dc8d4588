"""Access verdicts derived from a user's stored moderation attributes.

Everything here is pure: the verdict depends only on the user record and the
``now`` passed in. Timed bans and mutes are never cleared when they lapse; an
expired ``banned_until`` simply stops counting on the next evaluation.
"""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from app.models.enums import UserRole
from app.models.user import User


class AccessStatus(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    DEACTIVATED = "deactivated"
    ACTIVE = "active"


@dataclass(frozen=True)
class AccessState:
    status: AccessStatus
    user_id: uuid.UUID | None = None
    role: UserRole | None = None
    blocked: bool = False
    silenced: bool = False

    @property
    def is_active(self) -> bool:
        return self.status is AccessStatus.ACTIVE

    @property
    def can_write(self) -> bool:
        return self.is_active and not self.blocked

    @property
    def can_react(self) -> bool:
        # A ban is a superset of a mute.
        return self.can_write and not self.silenced

    @property
    def is_admin(self) -> bool:
        return self.is_active and self.role is not None and is_admin(self.role)


ANONYMOUS = AccessState(status=AccessStatus.UNAUTHENTICATED)


def is_admin(role: UserRole) -> bool:
    role = UserRole(role)
    if role is UserRole.ADMIN:
        return True
    if role is UserRole.USER:
        return False
    raise ValueError(f"Unknown role: {role!r}")


def as_utc(value: datetime | None) -> datetime | None:
    """Storage may hand back naive timestamps (SQLite); they are UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _until_in_future(until: datetime | None, now: datetime) -> bool:
    until = as_utc(until)
    return until is not None and until > now


def is_blocked(user: User, now: datetime) -> bool:
    return bool(user.is_banned) or _until_in_future(user.banned_until, now)


def is_silenced(user: User, now: datetime) -> bool:
    return bool(user.muted_forever) or _until_in_future(user.muted_until, now)


def evaluate_access(user: User | None, now: datetime) -> AccessState:
    if user is None:
        return ANONYMOUS
    if user.deactivated_at is not None:
        return AccessState(
            status=AccessStatus.DEACTIVATED, user_id=user.id, role=user.role
        )
    return AccessState(
        status=AccessStatus.ACTIVE,
        user_id=user.id,
        role=user.role,
        blocked=is_blocked(user, now),
        silenced=is_silenced(user, now),
    )
