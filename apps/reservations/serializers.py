"""Serializers for reservations."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.rooms.models import Room
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange

from .models import Reservation


class ReservationCreateSerializer(serializers.Serializer):
    """
    Reservation commit payload

    Guests commit from a hold; staff may also book a room and range directly.
    """

    hold = serializers.IntegerField(min_value=1, required=False)
    room = serializers.PrimaryKeyRelatedField(queryset=Room.objects.all(), required=False)
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)
    guest_name = serializers.CharField(max_length=255)
    guest_email = serializers.EmailField()
    guests_count = serializers.IntegerField(min_value=1, default=1)

    def validate(self, attrs):  # type: ignore
        if attrs.get("hold"):
            return attrs

        request = self.context.get("request")
        if not (request and request.user.is_staff):
            raise serializers.ValidationError({"hold": ["A room hold is required to reserve."]})
        missing = [name for name in ("room", "check_in", "check_out") if not attrs.get(name)]
        if missing:
            raise serializers.ValidationError({name: ["This field is required."] for name in missing})
        try:
            attrs["dates"] = DateRange(attrs["check_in"], attrs["check_out"])
        except ValidationError as exc:
            raise serializers.ValidationError(exc.message)
        return attrs


class ReservationSerializer(serializers.ModelSerializer):
    room_id = serializers.ReadOnlyField(source="room.id")
    pod_id = serializers.ReadOnlyField(source="room.pod_id")
    nights = serializers.ReadOnlyField()

    class Meta:
        model = Reservation
        fields = [
            "id",
            "reservation_code",
            "room_id",
            "pod_id",
            "guest_name",
            "guest_email",
            "guests_count",
            "check_in",
            "check_out",
            "nights",
            "status",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
        ]
        read_only_fields = fields


class ReservationCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
