"""
Clock

Expiry and overlap checks never read the wall clock directly: services
receive a Clock so that "now" is explicit and tests can move time.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from django.utils import timezone


class Clock(ABC):
    """Source of the current time"""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current aware datetime"""


class SystemClock(Clock):
    """Wall clock backed by django.utils.timezone"""

    def now(self) -> datetime:
        return timezone.now()


class FrozenClock(Clock):
    """
    Clock that only moves when told to

    Usage:
        clock = FrozenClock(timezone.now())
        controller = HoldLifecycleController(clock=clock)
        clock.advance(minutes=6)
    """

    def __init__(self, current: datetime | None = None):
        self._current = current or timezone.now()

    def now(self) -> datetime:
        return self._current

    def advance(self, **kwargs) -> datetime:
        self._current = self._current + timedelta(**kwargs)
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current


system_clock = SystemClock()
