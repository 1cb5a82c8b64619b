"""Integration tests for the hold API endpoints."""

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


class HoldAPITests(APITestCase):
    """Covers hold creation, extension, release and staff operations."""

    def setUp(self) -> None:
        self.room = Room.objects.create(floor=Room.Zone.WOMEN_ONLY, price_per_night=Decimal("65.00"))
        self.list_url = reverse("hold-list")
        self.payload = {"room": self.room.pk, "check_in": "2030-03-01", "check_out": "2030-03-03"}

    def _as(self, session_id: str) -> dict[str, str]:
        return {"HTTP_X_BOOKING_SESSION": session_id}

    def _create(self, session_id: str = "session-a", **overrides):
        payload = dict(self.payload, **overrides)
        return self.client.post(self.list_url, payload, format="json", **self._as(session_id))

    def _staff(self):
        return User.objects.create_user(username="staff", password="StaffPass123", is_staff=True)

    def test_guest_can_hold_a_room(self) -> None:
        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["stage"], RoomHold.Stage.CONFIRMATION)
        self.assertEqual(response.data["room"]["pod_id"], "101")
        self.assertEqual(response.data["nights"], 2)
        self.assertEqual(RoomHold.objects.get().session_id, "session-a")

    def test_other_session_gets_conflict(self) -> None:
        self._create("session-a")

        response = self._create("session-b")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "RoomUnavailableError")

    def test_invalid_requests(self) -> None:
        response = self._create(check_in="2030-03-03", check_out="2030-03-01")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self._create(room=999999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_hold_hides_room_from_other_sessions_only(self) -> None:
        self._create("session-a")
        url = reverse("room-available")
        params = {"check_in": "2030-03-01", "check_out": "2030-03-03"}

        theirs = self.client.get(url, params, **self._as("session-b"))
        mine = self.client.get(url, params, **self._as("session-a"))

        self.assertEqual(theirs.data, [])
        self.assertEqual([item["id"] for item in mine.data], [self.room.pk])

    def test_session_holds_and_validate(self) -> None:
        hold_id = self._create().data["id"]

        response = self.client.get(reverse("hold-session"), **self._as("session-a"))
        self.assertEqual([item["id"] for item in response.data], [hold_id])
        response = self.client.get(reverse("hold-session"), **self._as("session-b"))
        self.assertEqual(response.data, [])

        validate_url = reverse("hold-validate", args=[hold_id])
        self.assertTrue(self.client.get(validate_url, **self._as("session-a")).data["valid"])
        self.assertFalse(self.client.get(validate_url, **self._as("session-b")).data["valid"])

    def test_session_falls_back_to_django_session(self) -> None:
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        response = self.client.get(reverse("hold-session"))
        self.assertEqual(len(response.data), 1)

    def test_extend_to_payment(self) -> None:
        hold_id = self._create().data["id"]
        url = reverse("hold-extend", args=[hold_id])

        response = self.client.patch(url, {"stage": "payment"}, format="json", **self._as("session-a"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["stage"], RoomHold.Stage.PAYMENT)

    def test_extend_error_codes(self) -> None:
        hold_id = self._create().data["id"]
        url = reverse("hold-extend", args=[hold_id])

        response = self.client.patch(url, {}, format="json", **self._as("session-b"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.patch(url, {"stage": "checkout"}, format="json", **self._as("session-a"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        RoomHold.objects.filter(pk=hold_id).update(hold_expiry=timezone.now() - timedelta(seconds=1))
        response = self.client.patch(url, {}, format="json", **self._as("session-a"))
        self.assertEqual(response.status_code, status.HTTP_410_GONE)

        RoomHold.objects.filter(pk=hold_id).delete()
        response = self.client.patch(url, {}, format="json", **self._as("session-a"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_release_is_idempotent_and_owner_only(self) -> None:
        hold_id = self._create().data["id"]
        url = reverse("hold-detail", args=[hold_id])

        self.assertEqual(self.client.delete(url, **self._as("session-b")).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.delete(url, **self._as("session-a")).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(url, **self._as("session-a")).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(RoomHold.objects.exists())

    def test_release_session(self) -> None:
        self._create()
        self._create(check_in="2030-04-01", check_out="2030-04-02")

        response = self.client.post(reverse("hold-release-session"), **self._as("session-a"))

        self.assertEqual(response.data, {"released": 2})
        self.assertFalse(RoomHold.objects.exists())

    def test_staff_only_operations(self) -> None:
        hold_id = self._create().data["id"]
        reservation = Reservation.objects.create(
            room=self.room,
            guest_name="Guest",
            guest_email="guest@example.com",
            check_in="2030-03-01",
            check_out="2030-03-03",
        )
        convert_url = reverse("hold-convert", args=[hold_id])

        response = self.client.post(convert_url, {"reservation": reservation.pk}, format="json")
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        response = self.client.post(reverse("hold-cleanup"))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

        self.client.force_authenticate(self._staff())
        response = self.client.post(convert_url, {"reservation": reservation.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["converted"])

        response = self.client.post(reverse("hold-convert", args=[424242]), {"reservation": reservation.pk}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_cleanup_purges_expired_holds(self) -> None:
        hold_id = self._create().data["id"]
        RoomHold.objects.filter(pk=hold_id).update(hold_expiry=timezone.now() - timedelta(minutes=1))
        self.client.force_authenticate(self._staff())

        response = self.client.post(reverse("hold-cleanup"))

        self.assertEqual(response.data, {"purged": 1})
