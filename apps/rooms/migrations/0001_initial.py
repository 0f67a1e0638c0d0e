import uuid
from decimal import Decimal

import apps.rooms.models
import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                (
                    "room_type",
                    models.CharField(
                        choices=[
                            ("stay", "Проживание"),
                            ("conference", "Переговорная"),
                            ("event", "Площадка для мероприятий"),
                        ],
                        default="stay",
                        max_length=20,
                    ),
                ),
                (
                    "base_price",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Цена за ночь/день, либо фиксированная цена для мероприятий.",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("currency", models.CharField(default=apps.rooms.models.default_currency, max_length=3)),
                ("max_guests", models.PositiveSmallIntegerField(default=1)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "На модерации"),
                            ("approved", "Одобрено"),
                            ("rejected", "Отклонено"),
                            ("inactive", "Неактивно"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("is_published", models.BooleanField(default=False)),
                (
                    "availability_start",
                    models.DateField(blank=True, help_text="Первый день, доступный для бронирования.", null=True),
                ),
                (
                    "availability_end",
                    models.DateField(blank=True, help_text="Последний день, доступный для бронирования.", null=True),
                ),
                (
                    "is_always_available",
                    models.BooleanField(default=False, help_text="Игнорировать окно доступности."),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "host",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rooms",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Помещение",
                "verbose_name_plural": "Помещения",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["host"], name="rooms_room_host_id_idx"),
                    models.Index(fields=["status", "is_published"], name="rooms_room_status_pub_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(availability_start__isnull=True)
                            | models.Q(availability_end__isnull=True)
                            | models.Q(availability_end__gte=models.F("availability_start"))
                        ),
                        name="room_valid_availability_window",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RoomBlockedDate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("day", models.DateField()),
                ("reason", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "room",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="blocked_dates",
                        to="rooms.room",
                    ),
                ),
            ],
            options={
                "verbose_name": "Закрытый день",
                "verbose_name_plural": "Закрытые дни",
                "ordering": ["day"],
                "constraints": [
                    models.UniqueConstraint(fields=("room", "day"), name="unique_room_blocked_day"),
                ],
            },
        ),
    ]
