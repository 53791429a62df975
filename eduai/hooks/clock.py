"""Clock implementations for the Clock hook.

SystemClock is the production source of time. FixedClock is used by tests
and demos that need deterministic timestamps; advance() moves it forward.
"""

from datetime import datetime, timedelta, timezone

from eduai.hooks.interfaces import Clock


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """A clock that only moves when told to.

    Args:
        start: The initial time. Naive datetimes are taken as UTC.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, **delta: float) -> datetime:
        """Moves the clock forward by a timedelta built from ``delta``.

        Example: ``clock.advance(minutes=5)``.
        """
        self._now = self._now + timedelta(**delta)
        return self._now
