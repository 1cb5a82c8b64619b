"""Tests for hold persistence and the expiry sweep."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase

from apps.holds.models import RoomHold
from apps.holds.store import HoldStore
from apps.reservations.models import Reservation
from apps.rooms.models import Room
from shared.domain.clock import FrozenClock
from shared.domain.exceptions import NotFoundError, ValidationError
from shared.domain.value_objects import DateRange

TTL = timedelta(minutes=5)


class HoldStoreTests(TestCase):
    def setUp(self) -> None:
        self.clock = FrozenClock(datetime(2030, 1, 1, 12, 0, tzinfo=dt_timezone.utc))
        self.store = HoldStore(clock=self.clock)
        self.room = Room.objects.create(floor=Room.Zone.WOMEN_ONLY, price_per_night=Decimal("65.00"))
        self.check_in = date(2030, 3, 10)
        self.check_out = date(2030, 3, 13)
        self.dates = DateRange(self.check_in, self.check_out)

    def _hold(self, session_id: str = "session-a", **kwargs) -> RoomHold:
        params = dict(check_in=self.check_in, check_out=self.check_out, ttl=TTL)
        params.update(kwargs)
        return self.store.create(
            self.room,
            params.pop("check_in"),
            params.pop("check_out"),
            session_id,
            **params,
        )

    def _reservation(self) -> Reservation:
        return Reservation.objects.create(
            room=self.room,
            guest_name="Guest",
            guest_email="guest@example.com",
            check_in=self.check_in,
            check_out=self.check_out,
        )

    def test_create_stamps_times_from_clock(self) -> None:
        hold = self._hold()

        self.assertEqual(hold.created_at, self.clock.now())
        self.assertEqual(hold.hold_expiry, self.clock.now() + TTL)
        self.assertEqual(hold.stage, RoomHold.Stage.CONFIRMATION)
        self.assertFalse(hold.converted)
        self.assertEqual(hold.nights, 3)

    def test_create_validates_input(self) -> None:
        with self.assertRaises(ValidationError):
            self._hold(ttl=timedelta(0))
        with self.assertRaises(ValidationError):
            self._hold(ttl=None)
        with self.assertRaises(ValidationError):
            self._hold(check_in=self.check_out, check_out=self.check_in)
        with self.assertRaises(ValidationError):
            self._hold(session_id="")
        with self.assertRaises(ValidationError):
            self._hold(stage="checkout")
        self.assertFalse(RoomHold.objects.exists())

    def test_find_active_overlapping(self) -> None:
        hold = self._hold()

        found = self.store.find_active_overlapping(self.room, date(2030, 3, 12), date(2030, 3, 15))
        self.assertEqual(found, [hold])

        adjacent = self.store.find_active_overlapping(self.room, self.check_out, date(2030, 3, 15))
        self.assertEqual(adjacent, [])

        own = self.store.find_active_overlapping(
            self.room, self.check_in, self.check_out, exclude_session_id="session-a"
        )
        self.assertEqual(own, [])

    def test_expired_hold_never_blocks_even_before_sweep(self) -> None:
        self._hold()
        self.clock.advance(minutes=5)

        self.assertEqual(self.store.find_active_overlapping(self.room, self.check_in, self.check_out), [])
        self.assertEqual(RoomHold.objects.count(), 1)

    def test_converted_hold_never_blocks(self) -> None:
        hold = self._hold()
        self.store.mark_converted(hold.pk, self._reservation().pk)

        self.assertEqual(self.store.find_active_overlapping(self.room, self.check_in, self.check_out), [])

    def test_find_by_session_newest_first(self) -> None:
        older = self._hold()
        self.clock.advance(minutes=1)
        newer = self._hold(check_in=date(2030, 4, 1), check_out=date(2030, 4, 2))
        self._hold(session_id="session-b")

        self.assertEqual(self.store.find_by_session("session-a"), [newer, older])

        self.clock.advance(minutes=4, seconds=30)
        self.assertEqual(self.store.find_by_session("session-a"), [newer])
        self.assertEqual(len(self.store.find_by_session("session-a", active_only=False)), 2)

    def test_blocking_ranges_group_by_room(self) -> None:
        self._hold(session_id="session-b")

        ranges = self.store.blocking_ranges([self.room.pk], self.dates)
        self.assertEqual(ranges, {self.room.pk: [self.dates]})
        self.assertEqual(self.store.blocked_room_ids(self.dates), {self.room.pk})
        self.assertEqual(self.store.blocked_room_ids(self.dates, exclude_session_id="session-b"), set())

    def test_updates_on_missing_hold_raise_not_found(self) -> None:
        expiry = self.clock.now() + TTL
        with self.assertRaises(NotFoundError):
            self.store.extend(424242, expiry)
        with self.assertRaises(NotFoundError):
            self.store.advance_stage(424242, RoomHold.Stage.PAYMENT, expiry)
        with self.assertRaises(NotFoundError):
            self.store.mark_converted(424242, None)
        with self.assertRaises(NotFoundError):
            self.store.get(424242)

    def test_advance_stage_rejects_unknown_stage(self) -> None:
        hold = self._hold()
        with self.assertRaises(ValidationError):
            self.store.advance_stage(hold.pk, "checkout", self.clock.now())

    def test_release_is_idempotent(self) -> None:
        hold = self._hold()

        self.assertEqual(self.store.release(hold.pk), 1)
        self.assertEqual(self.store.release(hold.pk), 0)
        self.assertEqual(self.store.release("not-a-number"), 0)

    def test_release_by_session_keeps_converted_holds(self) -> None:
        converted = self._hold()
        self.store.mark_converted(converted.pk, self._reservation().pk)
        self._hold(check_in=date(2030, 4, 1), check_out=date(2030, 4, 3))
        other = self._hold(session_id="session-b")

        self.assertEqual(self.store.release_by_session("session-a"), 1)
        self.assertEqual(set(RoomHold.objects.values_list("pk", flat=True)), {converted.pk, other.pk})

    def test_purge_expired_spares_active_and_converted(self) -> None:
        expired = self._hold()
        converted = self._hold(session_id="session-b")
        self.store.mark_converted(converted.pk, self._reservation().pk)
        self.clock.advance(minutes=6)
        active = self._hold(session_id="session-c")

        self.assertEqual(self.store.purge_expired(), 1)
        remaining = set(RoomHold.objects.values_list("pk", flat=True))
        self.assertNotIn(expired.pk, remaining)
        self.assertEqual(remaining, {converted.pk, active.pk})
        self.assertEqual(self.store.purge_expired(), 0)
