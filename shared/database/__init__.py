from shared.database.postgres import (
    AsyncSessionFactory,
    Base,
    get_async_session_factory,
    unit_of_work,
)

__all__ = [
    "Base",
    "get_async_session_factory",
    "AsyncSessionFactory",
    "unit_of_work",
]
