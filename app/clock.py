"""Time source for everything that compares against "now".

Ban and mute expiry is derived at read time, so services never call
``datetime.now`` directly; they receive a ``Clock`` and tests swap in a
``FrozenClock`` to move time forward without sleeping.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        self._now = self._now + timedelta(**delta)
        return self._now


_system_clock = SystemClock()


def get_clock() -> Clock:
    return _system_clock
