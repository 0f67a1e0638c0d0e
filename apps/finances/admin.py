"""Admin registration for earnings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Earning


@admin.register(Earning)
class EarningAdmin(admin.ModelAdmin):
    list_display = (
        "booking",
        "host",
        "amount",
        "platform_fee",
        "host_payout",
        "status",
        "available_date",
        "created_at",
    )
    list_filter = ("status", "payment_method", "available_date")
    search_fields = ("booking__id", "host__email", "payout_id")
    readonly_fields = ("amount", "platform_fee", "host_payout", "created_at", "updated_at")
