"""Room hold models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class RoomHold(models.Model):
    """Temporary soft-lock on a pod while a session confirms and pays.

    A hold never blocks anybody once ``hold_expiry`` has passed, whether or
    not the sweep has deleted it yet. Converted holds stay in the table as
    the audit trail of the reservation they became.
    """

    class Stage(models.TextChoices):
        CONFIRMATION = "confirmation", _("Confirmation")
        PAYMENT = "payment", _("Payment")

    # Allowed forward moves; a stage may always be refreshed in place.
    STAGE_ORDER = {Stage.CONFIRMATION: 0, Stage.PAYMENT: 1}

    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.CASCADE,
        related_name="holds",
    )
    check_in = models.DateField()
    check_out = models.DateField()
    session_id = models.CharField(max_length=64)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="room_holds",
    )
    stage = models.CharField(
        max_length=20,
        choices=Stage.choices,
        default=Stage.CONFIRMATION,
    )
    hold_expiry = models.DateTimeField()
    converted = models.BooleanField(default=False)
    reservation = models.ForeignKey(
        "reservations.Reservation",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="converted_holds",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room hold")
        verbose_name_plural = _("Room holds")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="hold_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="hold_room_dates_idx"),
            models.Index(fields=["hold_expiry"], name="hold_expiry_idx"),
            models.Index(fields=["session_id", "converted"], name="hold_session_idx"),
        ]

    def __str__(self) -> str:
        return f"Hold #{self.pk} on {self.room_id} ({self.check_in} - {self.check_out})"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def is_active(self, now=None) -> bool:
        now = now or timezone.now()
        return not self.converted and self.hold_expiry > now

    def is_expired(self, now=None) -> bool:
        now = now or timezone.now()
        return self.hold_expiry <= now
