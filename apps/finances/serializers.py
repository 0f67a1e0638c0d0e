"""Serializers for the earnings ledger."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Earning


class EarningSerializer(serializers.ModelSerializer):
    """Запись о доходе хозяина по бронированию."""

    room_title = serializers.ReadOnlyField(source="booking.room.title")
    check_in = serializers.ReadOnlyField(source="booking.check_in")
    check_out = serializers.ReadOnlyField(source="booking.check_out")

    class Meta:
        model = Earning
        fields = [
            "id",
            "booking",
            "room_title",
            "check_in",
            "check_out",
            "amount",
            "platform_fee",
            "host_payout",
            "currency",
            "status",
            "payment_method",
            "available_date",
            "paid_out_at",
            "payout_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class EarningsSummarySerializer(serializers.Serializer):
    available = serializers.DecimalField(max_digits=12, decimal_places=2)
    pending = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_out = serializers.DecimalField(max_digits=12, decimal_places=2)
    count = serializers.IntegerField()
