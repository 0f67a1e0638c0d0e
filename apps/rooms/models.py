"""Room models for SpaceBook."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_currency() -> str:
    return getattr(settings, "SPACEBOOK_CURRENCY", "PHP")


class Room(models.Model):
    """Сдаваемое пространство: жильё, переговорная или площадка для мероприятий."""

    class RoomType(models.TextChoices):
        STAY = "stay", _("Проживание")
        CONFERENCE = "conference", _("Переговорная")
        EVENT = "event", _("Площадка для мероприятий")

    class Status(models.TextChoices):
        PENDING = "pending", _("На модерации")
        APPROVED = "approved", _("Одобрено")
        REJECTED = "rejected", _("Отклонено")
        INACTIVE = "inactive", _("Неактивно")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="rooms",
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    room_type = models.CharField(
        max_length=20,
        choices=RoomType.choices,
        default=RoomType.STAY,
    )
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Цена за ночь/день, либо фиксированная цена для мероприятий."),
    )
    currency = models.CharField(max_length=3, default=default_currency)
    max_guests = models.PositiveSmallIntegerField(default=1)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    is_published = models.BooleanField(default=False)
    availability_start = models.DateField(
        null=True,
        blank=True,
        help_text=_("Первый день, доступный для бронирования."),
    )
    availability_end = models.DateField(
        null=True,
        blank=True,
        help_text=_("Последний день, доступный для бронирования."),
    )
    is_always_available = models.BooleanField(
        default=False,
        help_text=_("Игнорировать окно доступности."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Помещение")
        verbose_name_plural = _("Помещения")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(availability_start__isnull=True)
                    | models.Q(availability_end__isnull=True)
                    | models.Q(availability_end__gte=models.F("availability_start"))
                ),
                name="room_valid_availability_window",
            ),
        ]
        indexes = [
            models.Index(fields=["host"], name="rooms_room_host_id_idx"),
            models.Index(fields=["status", "is_published"], name="rooms_room_status_pub_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.room_type})"


class RoomBlockedDate(models.Model):
    """День, закрытый хозяином для бронирования."""

    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        related_name="blocked_dates",
    )
    day = models.DateField()
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Закрытый день")
        verbose_name_plural = _("Закрытые дни")
        ordering = ["day"]
        constraints = [
            models.UniqueConstraint(fields=["room", "day"], name="unique_room_blocked_day"),
        ]

    def __str__(self) -> str:
        return f"{self.room_id} blocked on {self.day}"
