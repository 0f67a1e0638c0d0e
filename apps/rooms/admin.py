"""Admin registrations for rooms."""

from __future__ import annotations

from django.contrib import admin

from .models import Room, RoomBlockedDate


class RoomBlockedDateInline(admin.TabularInline):
    model = RoomBlockedDate
    extra = 0
    fields = ("day", "reason")


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "room_type",
        "status",
        "is_published",
        "base_price",
        "currency",
        "max_guests",
        "host",
    )
    list_filter = ("room_type", "status", "is_published", "is_always_available")
    search_fields = ("title", "host__username", "host__email")
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [RoomBlockedDateInline]
