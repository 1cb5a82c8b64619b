"""Serializers for the pod inventory and availability search."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    capacity = serializers.ReadOnlyField()

    class Meta:
        model = Room
        fields = [
            "id",
            "pod_id",
            "floor",
            "quality",
            "status",
            "price_per_night",
            "capacity",
            "description",
        ]
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    """Query parameters shared by the availability and recommendation searches."""

    check_in = serializers.DateField()
    check_out = serializers.DateField()
    floor = serializers.ChoiceField(choices=Room.Zone.choices, required=False)
    quality = serializers.ChoiceField(choices=Room.Quality.choices, required=False)

    def validate(self, attrs):  # type: ignore
        try:
            attrs["dates"] = DateRange(attrs["check_in"], attrs["check_out"])
        except ValidationError as exc:
            raise serializers.ValidationError(exc.message)
        return attrs


class RecommendedRoomSerializer(serializers.Serializer):
    room = RoomSerializer()
    available_days = serializers.IntegerField()
    total_nights = serializers.IntegerField()
    availability_percentage = serializers.IntegerField()
    is_alternative_zone = serializers.BooleanField()
