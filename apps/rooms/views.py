"""Pod inventory and availability search API."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.holds.availability import AvailabilityResolver, RecommendationResolver
from apps.holds.sessions import resolve_session_id
from shared.domain.exceptions import DomainError
from shared.infrastructure.api import domain_error_response

from .filters import RoomFilterSet
from .models import Room
from .serializers import AvailabilityQuerySerializer, RecommendedRoomSerializer, RoomSerializer


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only pod listing plus date-based availability searches."""

    queryset = Room.objects.all()
    serializer_class = RoomSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = RoomFilterSet
    ordering_fields = ["price_per_night", "floor", "pod_id"]

    def _search_params(self, request):
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data
        return dict(
            check_in=data["dates"].start_date,
            check_out=data["dates"].end_date,
            floor=data.get("floor"),
            quality=data.get("quality"),
            exclude_session_id=resolve_session_id(request, create=False),
        )

    @action(detail=False, methods=["get"])
    def available(self, request):  # type: ignore
        params = self._search_params(request)
        try:
            rooms = AvailabilityResolver().find_available_rooms(**params)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(RoomSerializer(rooms, many=True).data)

    @action(detail=False, methods=["get"])
    def recommended(self, request):  # type: ignore
        params = self._search_params(request)
        try:
            recommended = RecommendationResolver().find_recommended_rooms(**params)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(RecommendedRoomSerializer(recommended, many=True).data)
