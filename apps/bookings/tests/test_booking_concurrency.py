"""Tests for the storage guard behind conflict detection."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import CreateBookingCommand
from apps.bookings.infrastructure.repositories import DjangoBookingRepository
from apps.bookings.models import BookedDay, Booking
from apps.rooms.models import Room
from shared.application.message_bus import message_bus
from shared.domain.calendar import utc_now
from shared.domain.exceptions import ConflictError

User = get_user_model()


def _room(host) -> Room:
    return Room.objects.create(
        host=host,
        title="Harbour view",
        room_type=Room.RoomType.STAY,
        base_price=Decimal("2000.00"),
        max_guests=2,
        status=Room.Status.APPROVED,
        is_published=True,
    )


class StaleReadTests(APITestCase):
    """A writer that read availability before another commit is still stopped."""

    def setUp(self) -> None:
        self.host = User.objects.create_user("host", "host@example.com", "HostPass123")
        self.first_guest = User.objects.create_user("first", "first@example.com", "GuestPass123")
        self.second_guest = User.objects.create_user("second", "second@example.com", "GuestPass123")
        self.room = _room(self.host)
        self.check_in = utc_now().date() + timedelta(days=14)

    def _command(self, guest, offset: int = 0, nights: int = 3) -> CreateBookingCommand:
        start = self.check_in + timedelta(days=offset)
        return CreateBookingCommand(
            room_id=self.room.id,
            guest_id=guest.pk,
            check_in=start,
            check_out=start + timedelta(days=nights),
        )

    def test_storage_guard_catches_stale_availability(self) -> None:
        message_bus.handle_command(self._command(self.first_guest))

        # the second writer sees no bookings at all, as if it read before the first commit
        with mock.patch.object(DjangoBookingRepository, "active_for_room", return_value=[]):
            with self.assertRaises(ConflictError) as ctx:
                message_bus.handle_command(self._command(self.second_guest, offset=2))

        self.assertEqual(ctx.exception.dates, [self.check_in + timedelta(days=2), self.check_in + timedelta(days=3)])
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(BookedDay.objects.filter(room=self.room).count(), 4)

    def test_stale_read_over_http_is_a_conflict(self) -> None:
        message_bus.handle_command(self._command(self.first_guest))
        self.client.force_authenticate(self.second_guest)
        payload = {
            "room": str(self.room.id),
            "check_in": str(self.check_in + timedelta(days=1)),
            "check_out": str(self.check_in + timedelta(days=2)),
        }

        with mock.patch.object(DjangoBookingRepository, "active_for_room", return_value=[]):
            response = self.client.post(reverse("booking-list"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(Booking.objects.filter(guest=self.second_guest).count(), 0)

    def test_non_overlapping_writer_is_unaffected(self) -> None:
        message_bus.handle_command(self._command(self.first_guest))

        with mock.patch.object(DjangoBookingRepository, "active_for_room", return_value=[]):
            booking = message_bus.handle_command(self._command(self.second_guest, offset=4))

        self.assertEqual(Booking.objects.count(), 2)
        self.assertEqual(BookedDay.objects.filter(booking_id=booking.id).count(), 4)


class BookedDayConstraintTests(TestCase):
    def test_room_day_is_unique(self) -> None:
        host = User.objects.create_user("host", "host@example.com", "HostPass123")
        guest = User.objects.create_user("guest", "guest@example.com", "GuestPass123")
        room = _room(host)
        day = utc_now().date() + timedelta(days=3)
        bookings = [
            Booking.objects.create(room=room, guest=guest, host=host, room_type="stay", check_in=day, check_out=day)
            for _ in range(2)
        ]
        BookedDay.objects.create(room=room, booking=bookings[0], day=day)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                BookedDay.objects.create(room=room, booking=bookings[1], day=day)

    def test_reversed_dates_are_refused_by_the_database(self) -> None:
        host = User.objects.create_user("host", "host@example.com", "HostPass123")
        room = _room(host)
        day = utc_now().date()

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Booking.objects.create(
                    room=room,
                    guest=host,
                    host=host,
                    room_type="stay",
                    check_in=day,
                    check_out=day - timedelta(days=1),
                )
