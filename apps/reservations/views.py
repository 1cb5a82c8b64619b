"""API views for reservations."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.holds.sessions import resolve_session_id
from shared.domain.exceptions import DomainError, HoldOwnershipError
from shared.infrastructure.api import domain_error_response

from .models import Reservation
from .serializers import (
    ReservationCancelSerializer,
    ReservationCreateSerializer,
    ReservationSerializer,
)
from .services import ReservationStore, reserve_from_hold


class ReservationViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Commit reservations; listing and cancellation are staff-only."""

    queryset = Reservation.objects.select_related("room").all()
    serializer_class = ReservationSerializer
    permission_classes = [permissions.IsAdminUser]
    filterset_fields = ["status", "room"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        if self.action == "cancel":
            return ReservationCancelSerializer
        return ReservationSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        guest = dict(
            guest_name=data["guest_name"],
            guest_email=data["guest_email"],
            guests_count=data["guests_count"],
            user=request.user,
        )
        try:
            if data.get("hold"):
                session_id = resolve_session_id(request, create=False)
                if not session_id and not request.user.is_staff:
                    raise HoldOwnershipError()
                reservation = reserve_from_hold(
                    data["hold"],
                    session_id,
                    **guest,
                )
            else:
                reservation = ReservationStore().create(
                    data["room"],
                    data["dates"].start_date,
                    data["dates"].end_date,
                    **guest,
                )
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(ReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation: Reservation = self.get_object()  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            reservation = ReservationStore().cancel(reservation, serializer.validated_data["reason"])
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(ReservationSerializer(reservation).data)
