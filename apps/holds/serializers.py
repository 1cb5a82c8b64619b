"""Serializers for room holds."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.reservations.models import Reservation
from apps.rooms.serializers import RoomSerializer
from shared.domain.exceptions import ValidationError
from shared.domain.value_objects import DateRange

from .models import RoomHold


class HoldSerializer(serializers.ModelSerializer):
    room = RoomSerializer(read_only=True)
    nights = serializers.ReadOnlyField()

    class Meta:
        model = RoomHold
        fields = [
            "id",
            "room",
            "check_in",
            "check_out",
            "nights",
            "stage",
            "hold_expiry",
            "converted",
            "reservation",
            "created_at",
        ]
        read_only_fields = fields


class HoldCreateSerializer(serializers.Serializer):
    """Payload for placing a hold on a pod."""

    room = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        try:
            attrs["dates"] = DateRange(attrs["check_in"], attrs["check_out"])
        except ValidationError as exc:
            raise serializers.ValidationError(exc.message)
        return attrs


class HoldExtendSerializer(serializers.Serializer):
    stage = serializers.ChoiceField(choices=RoomHold.Stage.choices, required=False)


class HoldConvertSerializer(serializers.Serializer):
    reservation = serializers.PrimaryKeyRelatedField(queryset=Reservation.objects.all())
