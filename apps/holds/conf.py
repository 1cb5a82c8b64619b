"""Hold policy settings with their defaults."""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings  # type: ignore

DEFAULT_CONFIRMATION_MINUTES = 5
DEFAULT_PAYMENT_MINUTES = 10
DEFAULT_MAX_LIFETIME_MINUTES = 15
DEFAULT_MAX_UNAVAILABLE_RATIO = 0.33
DEFAULT_RECOMMENDATION_LIMIT = 5
DEFAULT_SESSION_HEADER = "X-Booking-Session"


def stage_ttl(stage: str) -> timedelta:
    """How long a hold lives after entering (or refreshing) the given stage."""
    from .models import RoomHold

    if stage == RoomHold.Stage.PAYMENT:
        minutes = getattr(settings, "HOLD_PAYMENT_MINUTES", DEFAULT_PAYMENT_MINUTES)
    else:
        minutes = getattr(settings, "HOLD_CONFIRMATION_MINUTES", DEFAULT_CONFIRMATION_MINUTES)
    return timedelta(minutes=minutes)


def max_lifetime() -> timedelta:
    minutes = getattr(settings, "HOLD_MAX_LIFETIME_MINUTES", DEFAULT_MAX_LIFETIME_MINUTES)
    return timedelta(minutes=minutes)


def sweep_on_read() -> bool:
    return bool(getattr(settings, "HOLDS_SWEEP_ON_READ", False))


def max_unavailable_ratio() -> float:
    return float(getattr(settings, "RECOMMENDATION_MAX_UNAVAILABLE_RATIO", DEFAULT_MAX_UNAVAILABLE_RATIO))


def recommendation_limit() -> int:
    return int(getattr(settings, "RECOMMENDATION_LIMIT", DEFAULT_RECOMMENDATION_LIMIT))


def session_header() -> str:
    return getattr(settings, "BOOKING_SESSION_HEADER", DEFAULT_SESSION_HEADER)
