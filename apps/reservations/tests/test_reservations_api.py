"""Integration tests for reservation API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.holds.models import RoomHold
from apps.reservations.models import Reservation
from apps.rooms.models import Room

User = get_user_model()


class ReservationAPITests(APITestCase):
    """Covers committing from holds, conflicts and staff operations."""

    def setUp(self) -> None:
        self.room = Room.objects.create(floor=Room.Zone.BUSINESS, price_per_night=Decimal("95.00"))
        self.list_url = reverse("reservation-list")
        self.guest = {"guest_name": "Dana", "guest_email": "dana@example.com"}

    def _as(self, session_id: str) -> dict[str, str]:
        return {"HTTP_X_BOOKING_SESSION": session_id}

    def _hold(self, session_id: str = "session-a") -> int:
        response = self.client.post(
            reverse("hold-list"),
            {"room": self.room.pk, "check_in": "2030-06-01", "check_out": "2030-06-05"},
            format="json",
            **self._as(session_id),
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def _commit(self, hold_id: int, session_id: str = "session-a"):
        payload = dict(self.guest, hold=hold_id)
        return self.client.post(self.list_url, payload, format="json", **self._as(session_id))

    def _staff(self):
        user = User.objects.create_user(username="frontdesk", password="DeskPass123", is_staff=True)
        self.client.force_authenticate(user)
        return user

    def test_guest_commits_from_hold(self) -> None:
        hold_id = self._hold()

        response = self._commit(hold_id)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["check_in"], "2030-06-01")
        self.assertEqual(response.data["pod_id"], self.room.pod_id)
        hold = RoomHold.objects.get(pk=hold_id)
        self.assertTrue(hold.converted)
        self.assertEqual(hold.reservation_id, response.data["id"])

    def test_guest_needs_a_hold(self) -> None:
        payload = dict(self.guest, room=self.room.pk, check_in="2030-06-01", check_out="2030-06-05")

        response = self.client.post(self.list_url, payload, format="json", **self._as("session-a"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("hold", response.data)

    def test_commit_error_codes(self) -> None:
        hold_id = self._hold()

        self.assertEqual(self._commit(hold_id, "session-b").status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post(self.list_url, dict(self.guest, hold=hold_id), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self._commit(424242).status_code, status.HTTP_404_NOT_FOUND)

        RoomHold.objects.filter(pk=hold_id).update(hold_expiry=timezone.now() - timedelta(seconds=1))
        self.assertEqual(self._commit(hold_id).status_code, status.HTTP_410_GONE)
        self.assertFalse(Reservation.objects.exists())

    def test_losing_commit_gets_conflict_and_loses_its_hold(self) -> None:
        hold_a = self._hold("session-a")
        # Session B's hold slipped in before A's was visible
        hold_b = RoomHold.objects.create(
            room=self.room,
            check_in="2030-06-03",
            check_out="2030-06-04",
            session_id="session-b",
            hold_expiry=timezone.now() + timedelta(minutes=5),
        )

        self.assertEqual(self._commit(hold_a, "session-a").status_code, status.HTTP_201_CREATED)
        response = self._commit(hold_b.pk, "session-b")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "ConflictError")
        self.assertFalse(RoomHold.objects.filter(pk=hold_b.pk).exists())
        self.assertEqual(Reservation.objects.count(), 1)

    def test_staff_books_directly_and_lists(self) -> None:
        self._staff()
        payload = dict(self.guest, room=self.room.pk, check_in="2030-07-01", check_out="2030-07-03")

        created = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        conflict = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(conflict.status_code, status.HTTP_409_CONFLICT)

        listing = self.client.get(self.list_url)
        self.assertEqual([item["id"] for item in listing.data], [created.data["id"]])

    def test_staff_direct_booking_requires_room_and_dates(self) -> None:
        self._staff()

        response = self.client.post(self.list_url, dict(self.guest, room=self.room.pk), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("check_in", response.data)

    def test_listing_is_staff_only(self) -> None:
        response = self.client.get(self.list_url)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_cancel_frees_the_room(self) -> None:
        hold_id = self._hold()
        reservation_id = self._commit(hold_id).data["id"]
        self._staff()

        response = self.client.post(
            reverse("reservation-cancel", args=[reservation_id]), {"reason": "flight cancelled"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Reservation.Status.CANCELLED)
        available = self.client.get(reverse("room-available"), {"check_in": "2030-06-01", "check_out": "2030-06-05"})
        self.assertEqual([item["id"] for item in available.data], [self.room.pk])
