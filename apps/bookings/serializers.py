"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.entities import PaymentMethod, Transition

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Создание брони гостем."""

    room = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    check_in_time = serializers.RegexField(r"^\d{2}:\d{2}$", required=False, allow_blank=True, default="")
    check_out_time = serializers.RegexField(r"^\d{2}:\d{2}$", required=False, allow_blank=True, default="")
    guest_count = serializers.IntegerField(min_value=1, default=1)
    payment_method = serializers.ChoiceField(
        choices=[method.value for method in PaymentMethod],
        default=PaymentMethod.IN_PERSON.value,
    )
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")


class TransitionSerializer(serializers.Serializer):
    """Переход брони в новое состояние (общий эндпоинт)."""

    transition = serializers.ChoiceField(choices=[t.value for t in Transition])
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class CancellationQuoteSerializer(serializers.Serializer):
    can_cancel = serializers.BooleanField()
    refund_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    refund_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    currency = serializers.CharField()
    reason = serializers.CharField(allow_null=True)


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    room_id = serializers.ReadOnlyField(source="room.id")
    room_title = serializers.ReadOnlyField(source="room.title")
    guest_id = serializers.ReadOnlyField(source="guest.id")
    host_id = serializers.ReadOnlyField(source="host.id")
    price_breakdown = serializers.SerializerMethodField()
    cancellation_details = serializers.SerializerMethodField()
    payment_details = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "room_id",
            "room_title",
            "guest_id",
            "host_id",
            "room_type",
            "check_in",
            "check_out",
            "check_in_time",
            "check_out_time",
            "guest_count",
            "status",
            "payment_status",
            "payment_method",
            "total_price",
            "currency",
            "price_breakdown",
            "is_cancellable",
            "cancellation_deadline",
            "cancellation_details",
            "payment_details",
            "special_requests",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_price_breakdown(self, obj: Booking) -> dict:
        return {
            "base_price": str(obj.base_price),
            "units": obj.units,
            "subtotal": str(obj.subtotal),
            "service_fee_rate": str(obj.service_fee_rate),
            "service_fee": str(obj.service_fee),
            "total": str(obj.total_price),
            "currency": obj.currency,
        }

    def get_cancellation_details(self, obj: Booking) -> dict | None:
        if not obj.cancelled_at:
            return None
        return {
            "cancelled_at": obj.cancelled_at.isoformat(),
            "cancelled_by": obj.cancelled_by,
            "reason": obj.cancellation_reason,
            "refund_amount": str(obj.refund_amount) if obj.refund_amount is not None else None,
        }

    def get_payment_details(self, obj: Booking) -> dict | None:
        if not obj.paid_at:
            return None
        return {
            "paid_at": obj.paid_at.isoformat(),
            "amount": str(obj.paid_amount),
            "recorded_by": obj.payment_recorded_by_id,
        }
