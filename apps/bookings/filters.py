"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Фильтры списка бронирований: статус, помещение, даты, роль пользователя."""

    status = django_filters.MultipleChoiceFilter(choices=Booking.Status.choices)
    payment_status = django_filters.ChoiceFilter(choices=Booking.PaymentStatus.choices)
    room = django_filters.UUIDFilter(field_name="room_id")
    check_in_from = django_filters.DateFilter(field_name="check_in", lookup_expr="gte")
    check_in_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")
    # "guest" or "host": only bookings where the user plays that part
    role = django_filters.CharFilter(method="filter_role")

    class Meta:
        model = Booking
        fields = ["status", "payment_status", "room"]

    def filter_role(self, queryset, name, value):  # type: ignore
        user = getattr(self.request, "user", None)
        if user is None or not user.is_authenticated:
            return queryset
        if value == "guest":
            return queryset.filter(guest=user)
        if value == "host":
            return queryset.filter(host=user)
        return queryset
