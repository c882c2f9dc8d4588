"""Users service: pure business logic, no FastAPI imports."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.clock import Clock
from app.models.user import User
from app.users.exceptions import NoPasswordSetError, WrongPasswordError
from app.users.utils import verify_password

logger = logging.getLogger(__name__)


async def deactivate_self(user: User, password: str, db: AsyncSession, clock: Clock) -> User:
    """Deactivate the caller's own account after confirming the password.

    There is no self-service way back; only an admin can reactivate.
    """
    if not user.password_hash:
        raise NoPasswordSetError()
    if not verify_password(password, user.password_hash):
        raise WrongPasswordError()
    if user.deactivated_at is None:
        user.deactivated_at = clock.now()
        await db.flush()
    logger.info("User %s deactivated their own account", user.id)
    return user
