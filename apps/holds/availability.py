"""Availability and recommendation queries over rooms, reservations and holds.

Both resolvers return point-in-time snapshots. A room reported free here can
still be lost at commit time; the reservation store has the final word.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from apps.reservations.services import ReservationStore
from apps.rooms.models import Room
from apps.rooms.services import RoomInventory, fallback_zones
from shared.domain.clock import Clock, system_clock
from shared.domain.value_objects import DateRange

from . import conf
from .store import HoldStore

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Rooms free of reservations and of other sessions' active holds."""

    def __init__(
        self,
        inventory: RoomInventory | None = None,
        reservations: ReservationStore | None = None,
        holds: HoldStore | None = None,
        clock: Clock | None = None,
    ):
        self.clock = clock or system_clock
        self.inventory = inventory or RoomInventory()
        self.reservations = reservations or ReservationStore()
        self.holds = holds or HoldStore(clock=self.clock)

    def find_available_rooms(
        self,
        check_in,
        check_out,
        floor: str | None = None,
        quality: str | None = None,
        exclude_session_id: str | None = None,
    ) -> list[Room]:
        dates = DateRange.from_bounds(check_in, check_out)
        if conf.sweep_on_read():
            self.holds.purge_expired()

        blocked = self.reservations.blocked_room_ids(dates)
        blocked |= self.holds.blocked_room_ids(dates, exclude_session_id=exclude_session_id)

        rooms = self.inventory.find_by_filter(
            status=Room.Status.AVAILABLE,
            floor=floor,
            quality=quality,
        ).exclude(pk__in=blocked)
        result = list(rooms)
        logger.debug(f"{len(result)} rooms available for {dates} (blocked: {len(blocked)})")
        return result


@dataclass(frozen=True)
class RecommendedRoom:
    """A partially available room offered as a near miss."""

    room: Room
    available_days: int
    total_nights: int
    is_alternative_zone: bool = False

    @property
    def unavailable_days(self) -> int:
        return self.total_nights - self.available_days

    @property
    def availability_percentage(self) -> int:
        percentage = Decimal(self.available_days * 100) / Decimal(self.total_nights)
        return int(percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RecommendationResolver:
    """
    Rooms that are free for most, but not all, of the requested stay

    Candidates come from the requested zone plus its fallback zones. A room
    qualifies when some nights are taken and the taken share does not exceed
    RECOMMENDATION_MAX_UNAVAILABLE_RATIO.
    """

    def __init__(
        self,
        inventory: RoomInventory | None = None,
        reservations: ReservationStore | None = None,
        holds: HoldStore | None = None,
        clock: Clock | None = None,
    ):
        self.clock = clock or system_clock
        self.inventory = inventory or RoomInventory()
        self.reservations = reservations or ReservationStore()
        self.holds = holds or HoldStore(clock=self.clock)

    @staticmethod
    def _unavailable_nights(ranges: list[DateRange], dates: DateRange) -> int:
        # each blocker counts on its own; concurrent holds on a night add up
        return sum(dates.overlap_nights(blocked) for blocked in ranges)

    def find_recommended_rooms(
        self,
        check_in,
        check_out,
        floor: str | None = None,
        quality: str | None = None,
        exclude_session_id: str | None = None,
    ) -> list[RecommendedRoom]:
        dates = DateRange.from_bounds(check_in, check_out)
        if conf.sweep_on_read():
            self.holds.purge_expired()

        alternatives = set(fallback_zones(floor))
        floors = [floor, *alternatives] if floor else None
        rooms = list(
            self.inventory.find_by_filter(
                status=Room.Status.AVAILABLE,
                quality=quality,
                floors=floors,
            )
        )
        room_ids = [room.pk for room in rooms]

        ranges = self.reservations.blocking_ranges(room_ids, dates)
        for room_id, held in self.holds.blocking_ranges(
            room_ids, dates, exclude_session_id=exclude_session_id
        ).items():
            ranges.setdefault(room_id, []).extend(held)

        ratio = conf.max_unavailable_ratio()
        total = dates.nights
        recommended = []
        for room in rooms:
            unavailable = self._unavailable_nights(ranges.get(room.pk, []), dates)
            if unavailable == 0 or unavailable / total > ratio:
                continue
            recommended.append(
                RecommendedRoom(
                    room=room,
                    available_days=max(total - unavailable, 0),
                    total_nights=total,
                    is_alternative_zone=room.floor in alternatives,
                )
            )

        recommended.sort(key=lambda item: (item.room.price_per_night, item.room.pk))
        return recommended[: conf.recommendation_limit()]
