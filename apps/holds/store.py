"""Persistence of room holds.

The store owns creation, lookup, extension, release and the expiry sweep.
It never decides whether a hold *should* exist: conflict checks belong to
the lifecycle controller. Every read that feeds contention filters on
``hold_expiry > now`` itself, so correctness never depends on the sweep.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

from django.db import transaction  # type: ignore

from shared.domain.clock import Clock, system_clock
from shared.domain.exceptions import NotFoundError, ValidationError
from shared.domain.value_objects import DateRange
from shared.infrastructure.db import lock_queryset_if_possible

from .models import RoomHold

logger = logging.getLogger(__name__)


class HoldStore:
    """Hold repository backed by the RoomHold table."""

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or system_clock

    # ----- queries -----

    def _active(self, now: datetime | None = None):
        now = now or self.clock.now()
        return RoomHold.objects.filter(converted=False, hold_expiry__gt=now)

    @staticmethod
    def _overlapping(qs, dates: DateRange):
        return qs.filter(check_in__lt=dates.end_date, check_out__gt=dates.start_date)

    def get(self, hold_id, *, lock: bool = False) -> RoomHold:
        qs = RoomHold.objects.select_related("room")
        if lock:
            qs = lock_queryset_if_possible(qs)
        try:
            return qs.get(pk=hold_id)
        except (RoomHold.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Hold {hold_id} not found")

    def find_active_overlapping(self, room, check_in, check_out, exclude_session_id: str | None = None):
        """Unconverted, unexpired holds on ``room`` that share a night with the range."""
        dates = DateRange.from_bounds(check_in, check_out)
        qs = self._overlapping(self._active().filter(room=room), dates)
        if exclude_session_id:
            qs = qs.exclude(session_id=exclude_session_id)
        return list(qs)

    def find_by_session(self, session_id: str, active_only: bool = True):
        qs = RoomHold.objects.filter(session_id=session_id)
        if active_only:
            qs = qs.filter(converted=False, hold_expiry__gt=self.clock.now())
        return list(qs.select_related("room").order_by("-created_at", "-pk"))

    def find_session_hold(self, session_id: str, room, dates: DateRange) -> RoomHold | None:
        """The session's active hold on exactly this room and range, if any."""
        return (
            self._active()
            .filter(
                session_id=session_id,
                room=room,
                check_in=dates.start_date,
                check_out=dates.end_date,
            )
            .order_by("-created_at")
            .first()
        )

    def blocked_room_ids(self, dates: DateRange, exclude_session_id: str | None = None) -> set:
        qs = self._overlapping(self._active(), dates)
        if exclude_session_id:
            qs = qs.exclude(session_id=exclude_session_id)
        return set(qs.values_list("room_id", flat=True))

    def blocking_ranges(
        self,
        room_ids: Iterable,
        dates: DateRange,
        exclude_session_id: str | None = None,
    ) -> dict:
        """room_id -> list of held DateRanges overlapping ``dates``."""
        qs = self._overlapping(self._active().filter(room_id__in=list(room_ids)), dates)
        if exclude_session_id:
            qs = qs.exclude(session_id=exclude_session_id)
        ranges: dict = {}
        for room_id, start, end in qs.values_list("room_id", "check_in", "check_out"):
            ranges.setdefault(room_id, []).append(DateRange(start, end))
        return ranges

    # ----- mutations -----

    def create(
        self,
        room,
        check_in,
        check_out,
        session_id: str,
        user=None,
        stage: str = RoomHold.Stage.CONFIRMATION,
        ttl: timedelta | None = None,
    ) -> RoomHold:
        dates = DateRange.from_bounds(check_in, check_out)
        if ttl is None or ttl <= timedelta(0):
            raise ValidationError("Hold TTL must be positive")
        if stage not in RoomHold.Stage.values:
            raise ValidationError(f"Unknown hold stage: {stage}")
        if not session_id:
            raise ValidationError("Session id is required for a hold")

        now = self.clock.now()
        hold = RoomHold.objects.create(
            room=room,
            check_in=dates.start_date,
            check_out=dates.end_date,
            session_id=session_id,
            user=user if getattr(user, "is_authenticated", False) else None,
            stage=stage,
            hold_expiry=now + ttl,
            created_at=now,
        )
        logger.debug(f"Hold {hold.pk} created on room {hold.room_id} until {hold.hold_expiry.isoformat()}")
        return hold

    def _update(self, hold_id, **fields) -> RoomHold:
        updated = RoomHold.objects.filter(pk=hold_id).update(**fields)
        if not updated:
            raise NotFoundError(f"Hold {hold_id} not found")
        return self.get(hold_id)

    def extend(self, hold_id, new_expiry: datetime) -> RoomHold:
        return self._update(hold_id, hold_expiry=new_expiry)

    def advance_stage(self, hold_id, stage: str, new_expiry: datetime) -> RoomHold:
        if stage not in RoomHold.Stage.values:
            raise ValidationError(f"Unknown hold stage: {stage}")
        return self._update(hold_id, stage=stage, hold_expiry=new_expiry)

    def mark_converted(self, hold_id, reservation_id) -> RoomHold:
        return self._update(hold_id, converted=True, reservation_id=reservation_id)

    def release(self, hold_id) -> int:
        try:
            deleted, _ = RoomHold.objects.filter(pk=hold_id).delete()
        except (ValueError, TypeError):
            return 0
        return deleted

    def release_by_session(self, session_id: str) -> int:
        """Drop every unconverted hold of a session; converted ones stay as audit trail."""
        deleted, _ = RoomHold.objects.filter(session_id=session_id, converted=False).delete()
        return deleted

    def purge_expired(self) -> int:
        """
        Delete expired, unconverted holds

        Rows locked by an in-flight conversion are skipped and the delete
        re-checks ``converted=False``, so a conversion racing the sweep
        always keeps its hold.
        """
        now = self.clock.now()
        with transaction.atomic():
            candidates = lock_queryset_if_possible(
                RoomHold.objects.filter(converted=False, hold_expiry__lt=now),
                skip_locked=True,
            )
            ids = list(candidates.values_list("pk", flat=True))
            if not ids:
                return 0
            deleted, _ = RoomHold.objects.filter(
                pk__in=ids,
                converted=False,
                hold_expiry__lt=now,
            ).delete()
        return deleted
