"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "reservation_code",
        "room",
        "guest_name",
        "status",
        "check_in",
        "check_out",
        "created_at",
    )
    list_filter = ("status", "check_in", "check_out")
    search_fields = ("reservation_code", "guest_name", "guest_email", "room__pod_id")
    readonly_fields = ("reservation_code", "cancelled_at", "created_at", "updated_at")
