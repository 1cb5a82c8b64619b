"""Admin registration for room holds."""

from __future__ import annotations

from django.contrib import admin
from django.utils import timezone

from .lifecycle import HoldLifecycleController
from .models import RoomHold


class HoldStateFilter(admin.SimpleListFilter):
    title = "state"
    parameter_name = "state"

    def lookups(self, request, model_admin):
        return (
            ("active", "Active"),
            ("expired", "Expired"),
            ("converted", "Converted"),
        )

    def queryset(self, request, queryset):
        now = timezone.now()
        if self.value() == "active":
            return queryset.filter(converted=False, hold_expiry__gt=now)
        if self.value() == "expired":
            return queryset.filter(converted=False, hold_expiry__lte=now)
        if self.value() == "converted":
            return queryset.filter(converted=True)
        return queryset


@admin.register(RoomHold)
class RoomHoldAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "room",
        "check_in",
        "check_out",
        "session_id",
        "stage",
        "hold_expiry",
        "converted",
    )
    list_filter = (HoldStateFilter, "stage")
    search_fields = ("session_id", "room__pod_id")
    readonly_fields = [field.name for field in RoomHold._meta.fields]
    actions = ["release_holds"]

    def has_add_permission(self, request):
        return False

    @admin.action(description="Release selected holds")
    def release_holds(self, request, queryset):
        controller = HoldLifecycleController()
        released = sum(controller.release_hold(hold.pk) for hold in queryset)
        self.message_user(request, f"Released {released} hold(s)")
