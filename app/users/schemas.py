"""Users domain Pydantic V2 schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.access.evaluator import AccessStatus
from app.models.enums import UserRole


class AccessVerdictResponse(BaseModel):
    status: AccessStatus
    can_write: bool
    can_react: bool
    is_admin: bool
    banned_permanently: bool
    banned_until: datetime | None
    muted_permanently: bool
    muted_until: datetime | None


class MeResponse(BaseModel):
    id: UUID
    email: str
    name: str
    role: UserRole
    created_at: datetime
    deactivated_at: datetime | None
    access: AccessVerdictResponse


class DeactivateSelfRequest(BaseModel):
    password: str = Field(min_length=1, max_length=128)
