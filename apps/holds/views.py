"""API views for room holds."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import DomainError, HoldOwnershipError, ValidationError
from shared.infrastructure.api import domain_error_response

from .lifecycle import HoldLifecycleController
from .models import RoomHold
from .serializers import (
    HoldConvertSerializer,
    HoldCreateSerializer,
    HoldExtendSerializer,
    HoldSerializer,
)
from .sessions import resolve_session_id


class HoldViewSet(mixins.CreateModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """
    Hold lifecycle for the caller's booking session

    Guests act on their own holds only; conversion and the manual sweep are
    reserved for staff.
    """

    queryset = RoomHold.objects.select_related("room").all()
    serializer_class = HoldSerializer
    permission_classes = [permissions.AllowAny]
    staff_actions = {"convert", "cleanup"}

    def get_permissions(self):  # type: ignore
        if self.action in self.staff_actions:
            return [permissions.IsAdminUser()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return HoldCreateSerializer
        if self.action == "extend":
            return HoldExtendSerializer
        if self.action == "convert":
            return HoldConvertSerializer
        return HoldSerializer

    @property
    def controller(self) -> HoldLifecycleController:
        return HoldLifecycleController()

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            hold = self.controller.request_hold(
                data["room"],
                data["dates"].start_date,
                data["dates"].end_date,
                session_id=resolve_session_id(request),
                user=request.user,
            )
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(HoldSerializer(hold).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None, *args, **kwargs):  # type: ignore
        session_id = resolve_session_id(request, create=False)
        try:
            if not session_id and not request.user.is_staff:
                raise HoldOwnershipError()
            self.controller.release_hold(pk, session_id=session_id)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def session(self, request):  # type: ignore
        session_id = resolve_session_id(request, create=False)
        holds = self.controller.get_session_holds(session_id) if session_id else []
        return Response(HoldSerializer(holds, many=True).data)

    @action(detail=True, methods=["get"])
    def validate(self, request, pk=None):  # type: ignore
        session_id = resolve_session_id(request, create=False)
        valid = bool(session_id) and self.controller.validate_hold(pk, session_id)
        return Response({"valid": valid})

    @action(detail=True, methods=["patch"])
    def extend(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session_id = resolve_session_id(request, create=False)
        try:
            if not session_id:
                raise ValidationError("Booking session is required to extend a hold")
            hold = self.controller.extend_hold(
                pk,
                session_id=session_id,
                stage=serializer.validated_data.get("stage"),
            )
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(HoldSerializer(hold).data)

    @action(detail=False, methods=["post"], url_path="release-session")
    def release_session(self, request):  # type: ignore
        session_id = resolve_session_id(request, create=False)
        released = self.controller.abandon(session_id) if session_id else 0
        return Response({"released": released})

    @action(detail=True, methods=["post"])
    def convert(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            hold = self.controller.convert(pk, serializer.validated_data["reservation"].pk)
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(HoldSerializer(hold).data)

    @action(detail=False, methods=["post"])
    def cleanup(self, request):  # type: ignore
        return Response({"purged": self.controller.sweep()})
