"""Booking models for SpaceBook."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Booking(models.Model):
    """Бронирование помещения гостем."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ожидает подтверждения")
        CONFIRMED = "confirmed", _("Подтверждено")
        COMPLETED = "completed", _("Завершено")
        CANCELLED = "cancelled", _("Отменено")
        REJECTED = "rejected", _("Отклонено")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Ожидает оплаты")
        PAID = "paid", _("Оплачено")
        REFUNDED = "refunded", _("Возврат")
        CANCELLED = "cancelled", _("Отменено")

    class PaymentMethod(models.TextChoices):
        PROPERTY = "property", _("Оплата на месте")
        CARD = "card", _("Банковская карта")
        GCASH = "gcash", _("GCash")
        MAYA = "maya", _("Maya")

    class CancelledBy(models.TextChoices):
        USER = "user", _("Гость")
        HOST = "host", _("Хозяин")
        ADMIN = "admin", _("Администратор")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED, Status.COMPLETED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_bookings",
    )
    room_type = models.CharField(
        max_length=20,
        help_text=_("Тип помещения на момент бронирования."),
    )
    check_in = models.DateField()
    check_out = models.DateField()
    check_in_time = models.CharField(max_length=5, blank=True)
    check_out_time = models.CharField(max_length=5, blank=True)
    guest_count = models.PositiveSmallIntegerField(default=1)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.PROPERTY,
    )

    base_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    units = models.PositiveIntegerField(
        default=1,
        help_text=_("Количество оплачиваемых ночей/дней (1 для мероприятий)."),
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    service_fee_rate = models.DecimalField(max_digits=5, decimal_places=4, default=Decimal("0.10"))
    service_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="PHP")

    is_cancellable = models.BooleanField(default=True)
    cancellation_deadline = models.DateField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.CharField(max_length=10, choices=CancelledBy.choices, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    payment_recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    special_requests = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Бронирование")
        verbose_name_plural = _("Бронирования")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gte=models.F("check_in")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="bookings_room_dates_idx"),
            models.Index(fields=["status"], name="bookings_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.id} for {self.room_id} ({self.status})"


class BookedDay(models.Model):
    """Один занятый день помещения; уникальность (room, day) защищает от двойной брони."""

    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.CASCADE,
        related_name="booked_days",
    )
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="booked_days",
    )
    day = models.DateField()

    class Meta:
        verbose_name = _("Занятый день")
        verbose_name_plural = _("Занятые дни")
        ordering = ["day"]
        constraints = [
            models.UniqueConstraint(fields=["room", "day"], name="unique_room_booked_day"),
        ]

    def __str__(self) -> str:
        return f"{self.room_id} booked on {self.day}"
