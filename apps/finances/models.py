"""Financial domain models for SpaceBook."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Earning(models.Model):
    """Доход хозяина по оплаченному бронированию."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ожидает")
        AVAILABLE = "available", _("Доступно к выплате")
        PAID_OUT = "paid_out", _("Выплачено")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="earnings",
    )
    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="earning",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    platform_fee = models.DecimalField(max_digits=12, decimal_places=2)
    host_payout = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="PHP")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_method = models.CharField(max_length=20)
    available_date = models.DateField(help_text=_("День, после которого доход можно вывести."))
    paid_out_at = models.DateTimeField(null=True, blank=True)
    payout_id = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Доход")
        verbose_name_plural = _("Доходы")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["host", "status"], name="finances_host_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Earning {self.booking_id} ({self.status})"

    def apply_amount(self, amount: Decimal, fee_rate: Decimal) -> None:
        self.amount = amount
        self.platform_fee = (amount * fee_rate).quantize(Decimal("0.01"))
        self.host_payout = amount - self.platform_fee

    def mark_paid_out(self, payout_id: str = "") -> None:
        self.status = self.Status.PAID_OUT
        self.payout_id = payout_id
        self.paid_out_at = timezone.now()
        self.save(update_fields=["status", "payout_id", "paid_out_at", "updated_at"])
