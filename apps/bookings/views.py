"""API views for the booking domain."""

from __future__ import annotations

from uuid import UUID

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.command_handlers import (
    CreateBookingCommand,
    DeleteBookingCommand,
    TransitionBookingCommand,
)
from apps.bookings.application.queries import cancellation_quote
from apps.bookings.domain.entities import PaymentMethod, Transition
from shared.application.message_bus import message_bus
from shared.domain.identity import Actor

from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    CancellationQuoteSerializer,
    ReasonSerializer,
    TransitionSerializer,
)

UUID_PATTERN = "[0-9a-fA-F-]{36}"


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для создания бронирований и переходов по их жизненному циклу.

    Переходы не ищут бронь через get_queryset: гость, хозяин и
    администратор проверяются доменной моделью, поэтому посторонний
    пользователь получает 403, а не 404.
    """

    queryset = Booking.objects.select_related("room", "guest", "host").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["check_in", "created_at", "total_price"]
    lookup_value_regex = UUID_PATTERN

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(Q(guest=user) | Q(host=user))

    def _actor(self) -> Actor:
        return Actor.from_user(self.request.user)

    def _respond(self, booking_id, http_status=status.HTTP_200_OK) -> Response:
        row = Booking.objects.select_related("room", "guest", "host").get(pk=booking_id)
        return Response(BookingSerializer(row, context=self.get_serializer_context()).data, status=http_status)

    def _transition(self, request, pk, transition: Transition) -> Response:
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            TransitionBookingCommand(
                booking_id=UUID(pk),
                actor=self._actor(),
                transition=transition,
                reason=serializer.validated_data["reason"],
            )
        )
        return self._respond(booking.id)

    @extend_schema(request=BookingCreateSerializer, responses={201: BookingSerializer})
    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            CreateBookingCommand(
                room_id=data["room"],
                guest_id=request.user.pk,
                check_in=data["check_in"],
                check_out=data["check_out"],
                guest_count=data["guest_count"],
                payment_method=PaymentMethod(data["payment_method"]),
                check_in_time=data["check_in_time"],
                check_out_time=data["check_out_time"],
                special_requests=data["special_requests"],
            )
        )
        return self._respond(booking.id, status.HTTP_201_CREATED)

    def destroy(self, request, pk=None, *args, **kwargs):  # type: ignore
        message_bus.handle_command(DeleteBookingCommand(booking_id=UUID(pk), actor=self._actor()))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=ReasonSerializer, responses=BookingSerializer)
    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, Transition.CONFIRM)

    @extend_schema(request=ReasonSerializer, responses=BookingSerializer)
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, Transition.REJECT)

    @extend_schema(request=None, responses=BookingSerializer)
    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, Transition.MARK_PAYMENT_RECEIVED)

    @extend_schema(request=None, responses=BookingSerializer)
    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, Transition.COMPLETE)

    @extend_schema(request=ReasonSerializer, responses=BookingSerializer)
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._transition(request, pk, Transition.CANCEL)

    @extend_schema(request=TransitionSerializer, responses=BookingSerializer)
    @action(detail=True, methods=["post"])
    def transition(self, request, pk=None):  # type: ignore
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            TransitionBookingCommand(
                booking_id=UUID(pk),
                actor=self._actor(),
                transition=Transition(serializer.validated_data["transition"]),
                reason=serializer.validated_data["reason"],
            )
        )
        return self._respond(booking.id)

    @extend_schema(responses=CancellationQuoteSerializer)
    @action(detail=True, methods=["get"], url_path="can-cancel")
    def can_cancel(self, request, pk=None):  # type: ignore
        quote = cancellation_quote(UUID(pk), self._actor())
        payload = {
            "can_cancel": quote.can_cancel,
            "refund_amount": quote.refund_amount.amount,
            "refund_percentage": quote.refund_percentage * 100,
            "currency": quote.refund_amount.currency,
            "reason": quote.reason,
        }
        return Response(CancellationQuoteSerializer(payload).data)
