"""FilterSet definitions for the pod inventory listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    floor = django_filters.ChoiceFilter(field_name="floor", choices=Room.Zone.choices)
    quality = django_filters.ChoiceFilter(field_name="quality", choices=Room.Quality.choices)
    status = django_filters.ChoiceFilter(field_name="status", choices=Room.Status.choices)
    price_min = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="lte")

    class Meta:
        model = Room
        fields = ["floor", "quality", "status"]
