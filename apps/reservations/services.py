"""Reservation store: the final authority on pod exclusivity."""

from __future__ import annotations

import logging
from typing import Iterable, TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.rooms.models import Room
from shared.domain.exceptions import (
    ConflictError,
    HoldExpiredError,
    HoldOwnershipError,
    NotFoundError,
    ValidationError,
)
from shared.domain.value_objects import DateRange
from shared.infrastructure.db import lock_queryset_if_possible

from .models import Reservation

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.holds.lifecycle import HoldLifecycleController

logger = logging.getLogger(__name__)


class ReservationStore:
    """Committed reservations, read for contention and written atomically."""

    @staticmethod
    def _blocking():
        return Reservation.objects.exclude(status=Reservation.Status.CANCELLED)

    @staticmethod
    def _overlapping(qs, dates: DateRange):
        return qs.filter(check_in__lt=dates.end_date, check_out__gt=dates.start_date)

    def find_overlapping(self, room, check_in, check_out, exclude_reservation_id=None):
        dates = DateRange.from_bounds(check_in, check_out)
        qs = self._overlapping(self._blocking().filter(room=room), dates)
        if exclude_reservation_id is not None:
            qs = qs.exclude(pk=exclude_reservation_id)
        return list(qs)

    def blocked_room_ids(self, dates: DateRange) -> set:
        return set(self._overlapping(self._blocking(), dates).values_list("room_id", flat=True))

    def blocking_ranges(self, room_ids: Iterable, dates: DateRange) -> dict:
        """room_id -> list of reserved DateRanges overlapping ``dates``."""
        qs = self._overlapping(self._blocking().filter(room_id__in=list(room_ids)), dates)
        ranges: dict = {}
        for room_id, start, end in qs.values_list("room_id", "check_in", "check_out"):
            ranges.setdefault(room_id, []).append(DateRange(start, end))
        return ranges

    def get(self, reservation_id) -> Reservation:
        try:
            return Reservation.objects.select_related("room").get(pk=reservation_id)
        except (Reservation.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Reservation {reservation_id} not found")

    def create(
        self,
        room,
        check_in,
        check_out,
        *,
        guest_name: str,
        guest_email: str,
        guests_count: int = 1,
        user=None,
        status: str = Reservation.Status.PENDING,
    ) -> Reservation:
        """
        Insert a reservation after re-checking overlap under a row lock

        The pod row is locked with SELECT ... FOR UPDATE (where supported) so
        two commits for the same pod serialize; the loser sees the winner's
        row and gets ConflictError.
        """
        dates = DateRange.from_bounds(check_in, check_out)
        room_id = getattr(room, "pk", room)

        with transaction.atomic():
            try:
                locked_room = lock_queryset_if_possible(Room.objects.filter(pk=room_id)).get()
            except (Room.DoesNotExist, ValueError, TypeError):
                raise NotFoundError(f"Room {room_id} not found")

            if self.find_overlapping(locked_room, dates.start_date, dates.end_date):
                logger.info(f"Reservation conflict on room {room_id} for {dates}")
                raise ConflictError("Room is already booked for the selected dates")

            reservation = Reservation(
                room=locked_room,
                user=user if getattr(user, "is_authenticated", False) else None,
                guest_name=guest_name,
                guest_email=guest_email,
                guests_count=guests_count,
                check_in=dates.start_date,
                check_out=dates.end_date,
                status=status,
            )
            try:
                reservation.clean()
            except DjangoValidationError as exc:
                raise ValidationError(" ".join(exc.messages))
            reservation.save()

        logger.info(
            f"Reservation {reservation.reservation_code} committed for room {room_id}, dates {dates}"
        )
        return reservation

    @transaction.atomic
    def cancel(self, reservation: Reservation, reason: str = "") -> Reservation:
        reservation = Reservation.objects.select_for_update().get(pk=reservation.pk)
        if reservation.status == Reservation.Status.CANCELLED:
            return reservation
        if reservation.status == Reservation.Status.CHECKED_OUT:
            raise ValidationError("A completed stay cannot be cancelled")

        reservation.status = Reservation.Status.CANCELLED
        reservation.cancellation_reason = reason
        reservation.cancelled_at = timezone.now()
        reservation.save(update_fields=["status", "cancellation_reason", "cancelled_at", "updated_at"])
        logger.info(f"Reservation {reservation.reservation_code} cancelled")
        return reservation


def reserve_from_hold(
    hold_id,
    session_id: str | None,
    *,
    guest_name: str,
    guest_email: str,
    guests_count: int = 1,
    user=None,
    controller: "HoldLifecycleController | None" = None,
    store: ReservationStore | None = None,
) -> Reservation:
    """
    Commit a reservation for a held pod and retire the hold

    The hold row is locked for the whole commit so the expiry sweep cannot
    delete it between insert and conversion. When the store reports a
    conflict the stale hold is released and the ConflictError surfaces.
    """
    from apps.holds.lifecycle import HoldLifecycleController

    controller = controller or HoldLifecycleController()
    store = store or controller.reservations
    conflict: ConflictError | None = None
    reservation = None

    with transaction.atomic():
        hold = controller.holds.get(hold_id, lock=True)
        if session_id and hold.session_id != session_id:
            raise HoldOwnershipError()
        if hold.converted:
            if hold.reservation_id:
                return store.get(hold.reservation_id)
            raise ValidationError("Hold was already converted")
        if hold.is_expired(controller.clock.now()):
            raise HoldExpiredError()

        try:
            reservation = store.create(
                hold.room_id,
                hold.check_in,
                hold.check_out,
                guest_name=guest_name,
                guest_email=guest_email,
                guests_count=guests_count,
                user=user,
            )
        except ConflictError as exc:
            conflict = exc
        else:
            controller.convert(hold.pk, reservation.pk)

    if conflict is not None:
        controller.release_hold(hold_id)
        raise conflict
    return reservation
