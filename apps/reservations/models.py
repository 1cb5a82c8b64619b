"""Reservation models."""

from __future__ import annotations

import secrets

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Reservation(models.Model):
    """Committed stay of a guest in a pod."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CHECKED_IN = "checked-in", _("Checked in")
        CHECKED_OUT = "checked-out", _("Checked out")
        CANCELLED = "cancelled", _("Cancelled")

    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reservations",
    )
    reservation_code = models.CharField(max_length=12, unique=True, editable=False)
    guest_name = models.CharField(max_length=255)
    guest_email = models.EmailField()
    guests_count = models.PositiveSmallIntegerField(default=1)
    check_in = models.DateField()
    check_out = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="reservation_room_dates_idx"),
            models.Index(fields=["reservation_code"], name="reservation_code_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.reservation_code} for pod {self.room_id}"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_blocking(self) -> bool:
        return self.status != self.Status.CANCELLED

    def clean(self) -> None:
        if self.check_in >= self.check_out:
            raise ValidationError(_("Check-out date must be after check-in date."))
        if self.room_id and self.guests_count > self.room.capacity:
            raise ValidationError(
                _("Number of guests exceeds pod capacity.")
            )

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.reservation_code:
            self.reservation_code = self.generate_reservation_code()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_reservation_code() -> str:
        return secrets.token_hex(4).upper()
