"""Serializers for rooms and their availability."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Публичное представление помещения."""

    host_id = serializers.ReadOnlyField(source="host.id")
    unavailable_dates = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = [
            "id",
            "host_id",
            "title",
            "description",
            "room_type",
            "base_price",
            "currency",
            "max_guests",
            "status",
            "is_published",
            "availability_start",
            "availability_end",
            "is_always_available",
            "unavailable_dates",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_unavailable_dates(self, obj: Room) -> list[str]:
        return [day.isoformat() for day in obj.blocked_dates.values_list("day", flat=True)]


class AvailabilityQuerySerializer(serializers.Serializer):
    """Параметры запроса календаря: окно (start/end) и, опционально, выбранный диапазон."""

    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)
    check_in = serializers.DateField(required=False)
    check_out = serializers.DateField(required=False)

    def validate(self, attrs):  # type: ignore
        if ("start" in attrs) != ("end" in attrs):
            raise serializers.ValidationError("Параметры start и end передаются вместе.")
        if ("check_in" in attrs) != ("check_out" in attrs):
            raise serializers.ValidationError("Параметры check_in и check_out передаются вместе.")
        return attrs


class AvailabilityUpdateSerializer(serializers.Serializer):
    """Изменение закрытых дней и окна доступности хозяином."""

    unavailable_dates = serializers.ListField(
        child=serializers.DateField(),
        required=False,
        allow_empty=True,
    )
    availability_start = serializers.DateField(required=False, allow_null=True)
    availability_end = serializers.DateField(required=False, allow_null=True)
    is_always_available = serializers.BooleanField(required=False)


class ActiveBookingSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    status = serializers.CharField()


class SelectionSerializer(serializers.Serializer):
    check_in = serializers.DateField()
    check_out = serializers.DateField()


class AvailabilitySerializer(serializers.Serializer):
    """Ответ календаря помещения."""

    room_id = serializers.UUIDField()
    unavailable_days = serializers.ListField(child=serializers.DateField())
    active_bookings = ActiveBookingSerializer(many=True)
    conflict = serializers.BooleanField(required=False)
    conflicting_days = serializers.ListField(child=serializers.DateField(), required=False)
    selection = SelectionSerializer(required=False, allow_null=True)
