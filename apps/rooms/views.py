"""Room API views."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.queries import room_availability
from shared.application.message_bus import message_bus
from shared.domain.identity import Actor
from shared.domain.value_objects import DateRange

from .application.command_handlers import UpdateRoomAvailabilityCommand
from .models import Room
from .serializers import (
    AvailabilityQuerySerializer,
    AvailabilitySerializer,
    AvailabilityUpdateSerializer,
    RoomSerializer,
)


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """Просмотр помещений и управление их календарём."""

    queryset = Room.objects.select_related("host").all()
    serializer_class = RoomSerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        public = qs.filter(status=Room.Status.APPROVED, is_published=True)
        if user.is_authenticated:
            return public | qs.filter(host=user)
        return public

    @extend_schema(parameters=[AvailabilityQuerySerializer], responses=AvailabilitySerializer)
    @action(detail=True, methods=["get"], url_path="availability")
    def availability(self, request, pk=None):  # type: ignore
        room = self.get_object()
        params = AvailabilityQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data

        window = DateRange(data["start"], data["end"]) if "start" in data else None
        candidate = DateRange(data["check_in"], data["check_out"]) if "check_in" in data else None
        result = room_availability(room.pk, window=window, candidate=candidate)
        return Response(AvailabilitySerializer(result).data)

    @extend_schema(request=AvailabilityUpdateSerializer, responses=RoomSerializer)
    @availability.mapping.patch
    def update_availability(self, request, pk=None):  # type: ignore
        room = self.get_object()
        serializer = AvailabilityUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        blocked = data.pop("unavailable_dates", None)
        message_bus.handle_command(
            UpdateRoomAvailabilityCommand(
                room_id=room.pk,
                actor=Actor.from_user(request.user),
                blocked_days=frozenset(blocked) if blocked is not None else None,
                window=data,
            )
        )
        room.refresh_from_db()
        return Response(RoomSerializer(room, context=self.get_serializer_context()).data)
