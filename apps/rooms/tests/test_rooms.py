"""Tests for the pod inventory."""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.rooms.models import Room
from apps.rooms.services import RoomInventory, fallback_zones
from shared.domain.exceptions import NotFoundError


class RoomModelTests(TestCase):
    def test_pod_id_is_generated_per_zone(self) -> None:
        first = Room.objects.create(floor=Room.Zone.COUPLES, price_per_night=Decimal("80.00"))
        second = Room.objects.create(floor=Room.Zone.COUPLES, price_per_night=Decimal("80.00"))
        women = Room.objects.create(floor=Room.Zone.WOMEN_ONLY, price_per_night=Decimal("50.00"))

        self.assertEqual(first.pod_id, "301")
        self.assertEqual(second.pod_id, "302")
        self.assertEqual(women.pod_id, "101")

    def test_explicit_pod_id_is_kept(self) -> None:
        room = Room.objects.create(pod_id="199", floor=Room.Zone.WOMEN_ONLY, price_per_night=Decimal("50.00"))
        self.assertEqual(room.pod_id, "199")

    def test_zone_capacity_limit(self) -> None:
        Room.objects.create(pod_id="499", floor=Room.Zone.BUSINESS, price_per_night=Decimal("90.00"))
        with self.assertRaises(ValidationError):
            Room.next_pod_id(Room.Zone.BUSINESS)

    def test_unknown_zone_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            Room.next_pod_id("rooftop")

    def test_capacity_depends_on_zone(self) -> None:
        self.assertEqual(Room(floor=Room.Zone.COUPLES).capacity, 2)
        self.assertEqual(Room(floor=Room.Zone.MEN_ONLY).capacity, 1)


class RoomInventoryTests(TestCase):
    def setUp(self) -> None:
        self.inventory = RoomInventory()
        self.cheap = Room.objects.create(floor=Room.Zone.MEN_ONLY, price_per_night=Decimal("40.00"))
        self.pricey = Room.objects.create(floor=Room.Zone.MEN_ONLY, price_per_night=Decimal("90.00"))
        self.same_price = Room.objects.create(floor=Room.Zone.BUSINESS, price_per_night=Decimal("40.00"))
        self.closed = Room.objects.create(
            floor=Room.Zone.MEN_ONLY,
            price_per_night=Decimal("10.00"),
            status=Room.Status.MAINTENANCE,
        )

    def test_find_by_filter_orders_by_price_then_id(self) -> None:
        rooms = list(self.inventory.find_by_filter(status=Room.Status.AVAILABLE))
        self.assertEqual(rooms, [self.cheap, self.same_price, self.pricey])

    def test_find_by_filter_by_zone_list(self) -> None:
        rooms = list(self.inventory.find_by_filter(floors=[Room.Zone.BUSINESS]))
        self.assertEqual(rooms, [self.same_price])

    def test_get_unknown_room(self) -> None:
        with self.assertRaises(NotFoundError):
            self.inventory.get(999999)
        self.assertEqual(self.inventory.get(self.cheap.pk), self.cheap)

    def test_fallback_zones(self) -> None:
        self.assertEqual(fallback_zones(Room.Zone.WOMEN_ONLY), (Room.Zone.BUSINESS,))
        self.assertEqual(fallback_zones(Room.Zone.COUPLES), ())
        self.assertEqual(fallback_zones(None), ())


class RoomAPITests(APITestCase):
    def setUp(self) -> None:
        self.room = Room.objects.create(
            floor=Room.Zone.WOMEN_ONLY,
            quality=Room.Quality.CLASSIC,
            price_per_night=Decimal("65.00"),
        )
        Room.objects.create(floor=Room.Zone.COUPLES, quality=Room.Quality.GOLDEN, price_per_night=Decimal("120.00"))

    def test_list_filters_by_zone(self) -> None:
        response = self.client.get(reverse("room-list"), {"floor": Room.Zone.WOMEN_ONLY})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["pod_id"] for item in response.data], ["101"])

    def test_available_requires_valid_range(self) -> None:
        url = reverse("room-available")
        response = self.client.get(url, {"check_in": "2030-03-12", "check_out": "2030-03-10"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get(url, {"check_in": "2030-03-10"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_available_lists_free_rooms(self) -> None:
        response = self.client.get(
            reverse("room-available"),
            {"check_in": "2030-03-10", "check_out": "2030-03-12", "quality": Room.Quality.CLASSIC},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["id"] for item in response.data], [self.room.pk])
