"""
Common Value Objects

Value objects used across the booking domains:
- DateRange: a half-open range of nights (check-in to check-out)
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from django.utils import timezone

from shared.domain.base import ValueObject
from shared.domain.exceptions import ValidationError


def normalize_day(value: date | datetime | str) -> date:
    """
    Reduce a date-like value to its calendar day

    Aware datetimes are converted to the project time zone first so
    intraday drift never moves a stay to a different night.
    """
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}")
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localdate(value)
        return value.date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid date: {value!r}")


def intervals_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share at least one day."""
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for holds, reservations and availability checks.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValidationError(
                f"Check-out date ({self.end_date}) must be after check-in date ({self.start_date})"
            )

    @classmethod
    def from_bounds(cls, check_in, check_out) -> 'DateRange':
        """Build a range from raw bounds, normalizing both to day granularity."""
        if check_in is None or check_out is None:
            raise ValidationError("Check-in and check-out dates are required")
        return cls(normalize_day(check_in), normalize_day(check_out))

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Note: end_date is exclusive, so adjacent ranges don't overlap.

        Examples:
            - DateRange(25, 28) overlaps with DateRange(27, 30) -> True
            - DateRange(25, 28) overlaps with DateRange(28, 31) -> False (adjacent)
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")
        return intervals_overlap(self.start_date, self.end_date, other.start_date, other.end_date)

    def overlap_nights(self, other: 'DateRange') -> int:
        """Number of nights shared with another range (0 when disjoint)."""
        start = max(self.start_date, other.start_date)
        end = min(self.end_date, other.end_date)
        return max((end - start).days, 0)

    def clip(self, start: date, end: date) -> 'DateRange | None':
        """Part of this range that falls inside [start, end), or None."""
        if not intervals_overlap(self.start_date, self.end_date, start, end):
            return None
        return DateRange(max(self.start_date, start), min(self.end_date, end))

    def contains(self, check_date: date) -> bool:
        return self.start_date <= check_date < self.end_date

    def days(self) -> Iterator[date]:
        """Iterate over every night in the range."""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    def __len__(self) -> int:
        return self.nights

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
