"""Moderation domain Pydantic V2 schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import UserRole

# A century; keeps now + hours inside the datetime range.
MAX_RESTRICTION_HOURS = 24 * 365 * 100


class ModerationCommand(BaseModel):
    """Ban and mute intents for one target.

    Within each group at most one intent is applied, by precedence:
    ``unban`` > ``ban_permanent`` > ``ban_hours`` and
    ``unmute`` > ``mute_permanent`` > ``mute_hours``.
    """

    model_config = ConfigDict(extra="forbid")

    unban: bool = Field(default=False, description="Lift any ban, permanent or timed.")
    ban_permanent: bool = Field(default=False, description="Ban until explicitly unbanned.")
    ban_hours: int | None = Field(
        default=None,
        gt=0,
        le=MAX_RESTRICTION_HOURS,
        description="Ban for this many hours from now.",
    )
    unmute: bool = Field(default=False, description="Lift any mute, permanent or timed.")
    mute_permanent: bool = Field(default=False, description="Mute until explicitly unmuted.")
    mute_hours: int | None = Field(
        default=None,
        gt=0,
        le=MAX_RESTRICTION_HOURS,
        description="Mute for this many hours from now.",
    )

    @property
    def touches_ban(self) -> bool:
        return self.unban or self.ban_permanent or self.ban_hours is not None

    @property
    def touches_mute(self) -> bool:
        return self.unmute or self.mute_permanent or self.mute_hours is not None


class ModerationStateResponse(BaseModel):
    """Stored moderation fields plus what they mean right now."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    role: UserRole
    is_banned: bool
    banned_until: datetime | None
    muted_forever: bool
    muted_until: datetime | None
    deactivated_at: datetime | None
    blocked: bool = Field(description="Banned at the time of the response.")
    silenced: bool = Field(description="Muted (or banned) at the time of the response.")


class AdminUserResponse(ModerationStateResponse):
    email: str
    name: str
    created_at: datetime


class AdminUserListResponse(BaseModel):
    items: list[AdminUserResponse]
