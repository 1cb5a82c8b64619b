"""
Hold lifecycle

    [none] --request_hold--> confirmation --extend_to_payment--> payment
    confirmation | payment --release / expiry--> gone
    confirmation | payment --convert--> converted (kept for audit)

Conflict checks at hold time are advisory: two sessions can race past them
and both hold a pod. The reservation commit decides which one gets it.
"""

from __future__ import annotations

import logging

from apps.reservations.services import ReservationStore
from apps.rooms.models import Room
from apps.rooms.services import RoomInventory
from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.clock import Clock, system_clock
from shared.domain.exceptions import (
    HoldExpiredError,
    HoldOwnershipError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)
from shared.domain.value_objects import DateRange

from . import conf
from .domain.events import (
    ExpiredHoldsPurged,
    HoldConverted,
    HoldCreated,
    HoldReleased,
    HoldStageAdvanced,
)
from .models import RoomHold
from .store import HoldStore

logger = logging.getLogger(__name__)


class HoldLifecycleController:
    """Entry point for every hold state change."""

    def __init__(
        self,
        holds: HoldStore | None = None,
        reservations: ReservationStore | None = None,
        inventory: RoomInventory | None = None,
        clock: Clock | None = None,
        bus: MessageBus | None = None,
    ):
        self.clock = clock or system_clock
        self.holds = holds or HoldStore(clock=self.clock)
        self.reservations = reservations or ReservationStore()
        self.inventory = inventory or RoomInventory()
        self.bus = bus

    def _uow(self) -> DjangoUnitOfWork:
        return DjangoUnitOfWork(bus=self.bus)

    @staticmethod
    def _check_owner(hold: RoomHold, session_id: str | None) -> None:
        if session_id and hold.session_id != session_id:
            raise HoldOwnershipError()

    def request_hold(self, room, check_in, check_out, session_id: str, user=None) -> RoomHold:
        """
        Place a confirmation-stage hold on a pod

        Raises:
            ValidationError: malformed range or missing session
            NotFoundError: unknown room
            RoomUnavailableError: room out of service, reserved, or held by
                another session for an overlapping range
        """
        dates = DateRange.from_bounds(check_in, check_out)
        if not session_id:
            raise ValidationError("Session id is required for a hold")
        room = self.inventory.get(room)

        if room.status != Room.Status.AVAILABLE:
            raise RoomUnavailableError(f"Pod {room.pod_id} is not open for booking")

        with self._uow() as uow:
            if self.reservations.find_overlapping(room, dates.start_date, dates.end_date):
                raise RoomUnavailableError()
            if self.holds.find_active_overlapping(
                room, dates.start_date, dates.end_date, exclude_session_id=session_id
            ):
                raise RoomUnavailableError("Room is temporarily held by another guest")

            existing = self.holds.find_session_hold(session_id, room, dates)
            if existing is not None:
                logger.debug(f"Session {session_id} already holds room {room.pk} for {dates}")
                return existing

            stage = RoomHold.Stage.CONFIRMATION
            hold = self.holds.create(
                room,
                dates.start_date,
                dates.end_date,
                session_id,
                user=user,
                stage=stage,
                ttl=conf.stage_ttl(stage),
            )
            uow.add_event(
                HoldCreated(
                    aggregate_id=hold.pk,
                    room_id=room.pk,
                    session_id=session_id,
                    dates=dates,
                    stage=stage,
                    hold_expiry=hold.hold_expiry,
                )
            )

        logger.info(f"Hold {hold.pk} placed on room {room.pk} for {dates} by session {session_id}")
        return hold

    def extend_hold(self, hold_id, session_id: str | None = None, stage: str | None = None) -> RoomHold:
        """
        Refresh a hold, optionally moving it to a later stage

        The new expiry is ``now + stage TTL`` but never later than the
        hold's maximum lifetime.
        """
        with self._uow() as uow:
            hold = self.holds.get(hold_id, lock=True)
            self._check_owner(hold, session_id)
            if hold.converted:
                return hold

            now = self.clock.now()
            if hold.is_expired(now):
                raise HoldExpiredError()

            target = stage or hold.stage
            if target not in RoomHold.Stage.values:
                raise ValidationError(f"Unknown hold stage: {target}")
            if RoomHold.STAGE_ORDER[target] < RoomHold.STAGE_ORDER[hold.stage]:
                raise ValidationError(f"Hold cannot move back from {hold.stage} to {target}")

            deadline = hold.created_at + conf.max_lifetime()
            if deadline <= now:
                raise HoldExpiredError("Hold reached its maximum lifetime")
            new_expiry = min(now + conf.stage_ttl(target), deadline)

            hold = self.holds.advance_stage(hold.pk, target, new_expiry)
            uow.add_event(
                HoldStageAdvanced(
                    aggregate_id=hold.pk,
                    session_id=hold.session_id,
                    stage=target,
                    hold_expiry=new_expiry,
                )
            )

        logger.info(f"Hold {hold.pk} extended to {new_expiry.isoformat()} ({target})")
        return hold

    def extend_to_payment(self, hold_id, session_id: str | None = None) -> RoomHold:
        return self.extend_hold(hold_id, session_id=session_id, stage=RoomHold.Stage.PAYMENT)

    def convert(self, hold_id, reservation_id) -> RoomHold:
        """Mark the hold as turned into ``reservation_id``; it stops contending."""
        with self._uow() as uow:
            hold = self.holds.get(hold_id, lock=True)
            if hold.converted:
                if hold.reservation_id == reservation_id:
                    return hold
                raise ValidationError(f"Hold {hold.pk} was already converted into reservation {hold.reservation_id}")
            hold = self.holds.mark_converted(hold.pk, reservation_id)
            uow.add_event(
                HoldConverted(
                    aggregate_id=hold.pk,
                    room_id=hold.room_id,
                    reservation_id=reservation_id,
                )
            )

        logger.info(f"Hold {hold.pk} converted into reservation {reservation_id}")
        return hold

    def release_hold(self, hold_id, session_id: str | None = None) -> int:
        """Drop a hold. Releasing a hold that is already gone is a no-op."""
        with self._uow() as uow:
            try:
                hold = self.holds.get(hold_id)
            except NotFoundError:
                return 0
            self._check_owner(hold, session_id)
            if hold.converted:
                return 0

            count = self.holds.release(hold.pk)
            if count:
                uow.add_event(HoldReleased(aggregate_id=hold.pk, session_id=hold.session_id, count=count))

        if count:
            logger.info(f"Hold {hold_id} released")
        return count

    def abandon(self, session_id: str) -> int:
        """Release every unconverted hold of a session."""
        with self._uow() as uow:
            count = self.holds.release_by_session(session_id)
            if count:
                uow.add_event(HoldReleased(session_id=session_id, count=count))

        if count:
            logger.info(f"Session {session_id} abandoned {count} hold(s)")
        return count

    def get_session_holds(self, session_id: str) -> list[RoomHold]:
        return self.holds.find_by_session(session_id)

    def validate_hold(self, hold_id, session_id: str) -> bool:
        try:
            hold = self.holds.get(hold_id)
        except NotFoundError:
            return False
        return hold.session_id == session_id and hold.is_active(self.clock.now())

    def sweep(self) -> int:
        """Delete expired, unconverted holds. Storage reclamation only."""
        with self._uow() as uow:
            count = self.holds.purge_expired()
            if count:
                uow.add_event(ExpiredHoldsPurged(count=count))

        logger.info(f"Expired holds purged: {count}")
        return count
