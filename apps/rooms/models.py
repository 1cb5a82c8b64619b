"""Pod inventory models."""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Room(models.Model):
    """A sleeping pod that guests can book per night."""

    class Zone(models.TextChoices):
        WOMEN_ONLY = "women-only", _("Women only")
        MEN_ONLY = "men-only", _("Men only")
        COUPLES = "couples", _("Couples")
        BUSINESS = "business", _("Business")

    class Quality(models.TextChoices):
        CLASSIC = "classic", _("Classic Pearl")
        MILK = "milk", _("Milk Pearl")
        GOLDEN = "golden", _("Golden Pearl")
        CRYSTAL = "crystal", _("Crystal Boba Suite")
        MATCHA = "matcha", _("Matcha Pearl")

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        MAINTENANCE = "maintenance", _("Maintenance")
        RESERVED = "reserved", _("Reserved")

    # Zone -> numeric floor used as the first digit of the pod id.
    ZONE_FLOORS = {
        Zone.WOMEN_ONLY: 1,
        Zone.MEN_ONLY: 2,
        Zone.COUPLES: 3,
        Zone.BUSINESS: 4,
    }
    MAX_PODS_PER_ZONE = 99

    pod_id = models.CharField(max_length=20, unique=True, blank=True)
    floor = models.CharField(max_length=20, choices=Zone.choices)
    quality = models.CharField(max_length=20, choices=Quality.choices, default=Quality.CLASSIC)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Pod")
        verbose_name_plural = _("Pods")
        ordering = ["floor", "pod_id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price_per_night__gte=0),
                name="room_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "floor", "quality"], name="room_status_floor_quality_idx"),
            models.Index(fields=["price_per_night"], name="room_price_idx"),
        ]

    def __str__(self) -> str:
        return f"Pod {self.pod_id} ({self.floor}, {self.quality})"

    @property
    def capacity(self) -> int:
        return 2 if self.floor == self.Zone.COUPLES else 1

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.AVAILABLE

    def save(self, *args, **kwargs):  # type: ignore
        if not self.pod_id:
            self.pod_id = self.next_pod_id(self.floor)
        super().save(*args, **kwargs)

    @classmethod
    def next_pod_id(cls, floor: str) -> str:
        """Next free id for a zone: floor digit + two-digit sequence (e.g. "301")."""
        numeric_floor = cls.ZONE_FLOORS.get(floor)
        if numeric_floor is None:
            raise ValidationError(_("Invalid floor zone: %(floor)s") % {"floor": floor})

        last = (
            cls.objects.filter(pod_id__regex=rf"^{numeric_floor}\d{{2}}$")
            .order_by("-pod_id")
            .values_list("pod_id", flat=True)
            .first()
        )
        sequence = int(last[1:]) + 1 if last else 1
        if sequence > cls.MAX_PODS_PER_ZONE:
            raise ValidationError(
                _("%(floor)s floor has reached maximum capacity") % {"floor": floor}
            )
        return f"{numeric_floor}{sequence:02d}"
