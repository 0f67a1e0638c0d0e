"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import BookedDay, Booking


class BookedDayInline(admin.TabularInline):
    model = BookedDay
    extra = 0
    fields = ("day",)
    readonly_fields = ("day",)
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "room",
        "guest",
        "host",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method", "room_type", "check_in")
    search_fields = ("id", "room__title", "guest__email", "host__email")
    readonly_fields = (
        "created_at",
        "updated_at",
        "base_price",
        "units",
        "subtotal",
        "service_fee_rate",
        "service_fee",
        "total_price",
        "refund_amount",
        "paid_at",
        "paid_amount",
    )
    inlines = [BookedDayInline]
    date_hierarchy = "check_in"


@admin.register(BookedDay)
class BookedDayAdmin(admin.ModelAdmin):
    list_display = ("room", "day", "booking")
    list_filter = ("day",)
    search_fields = ("room__title",)
