"""Read access to the pod inventory for the booking core."""

from __future__ import annotations

from typing import Iterable

from shared.domain.exceptions import NotFoundError

from .models import Room

# Zones whose guests may be offered another zone when their own is full.
ZONE_FALLBACKS: dict[str, tuple[str, ...]] = {
    Room.Zone.WOMEN_ONLY: (Room.Zone.BUSINESS,),
    Room.Zone.MEN_ONLY: (Room.Zone.BUSINESS,),
}


def fallback_zones(floor: str | None) -> tuple[str, ...]:
    if not floor:
        return ()
    return ZONE_FALLBACKS.get(floor, ())


class RoomInventory:
    """Room inventory collaborator used by the availability resolvers."""

    def find_by_filter(
        self,
        status: str | None = None,
        floor: str | None = None,
        quality: str | None = None,
        floors: Iterable[str] | None = None,
    ):
        """Rooms matching the filters, cheapest first (ties by id)."""
        qs = Room.objects.all()
        if status:
            qs = qs.filter(status=status)
        if floor:
            qs = qs.filter(floor=floor)
        elif floors is not None:
            qs = qs.filter(floor__in=list(floors))
        if quality:
            qs = qs.filter(quality=quality)
        return qs.order_by("price_per_night", "pk")

    def get(self, room_id) -> Room:
        if isinstance(room_id, Room):
            return room_id
        try:
            return Room.objects.get(pk=room_id)
        except (Room.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Room {room_id} not found")
