"""Admin registration for the pod inventory."""

from __future__ import annotations

from django.contrib import admin

from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("pod_id", "floor", "quality", "status", "price_per_night", "updated_at")
    list_filter = ("floor", "quality", "status")
    search_fields = ("pod_id", "description")
    readonly_fields = ("created_at", "updated_at")
    ordering = ("floor", "pod_id")
