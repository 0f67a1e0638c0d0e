"""Tests for the host earnings ledger."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.application.command_handlers import CreateBookingCommand, TransitionBookingCommand
from apps.bookings.domain.entities import Transition
from apps.bookings.models import Booking
from apps.finances.models import Earning
from apps.finances.services import earnings_summary, record_earning, release_due_earnings
from apps.rooms.models import Room
from shared.application.message_bus import message_bus
from shared.domain.calendar import utc_now
from shared.domain.identity import Actor, ActorRole

User = get_user_model()


class EarningsLedgerTests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user("host", "host@example.com", "HostPass123")
        self.guest = User.objects.create_user("guest", "guest@example.com", "GuestPass123")
        self.admin = User.objects.create_user("admin", "admin@example.com", "AdminPass123", is_staff=True)
        self.room = Room.objects.create(
            host=self.host,
            title="Loft",
            room_type=Room.RoomType.STAY,
            base_price=Decimal("3500.00"),
            max_guests=2,
            status=Room.Status.APPROVED,
            is_published=True,
        )
        self.today = utc_now().date()

    def _book(self, offset: int = 10, nights: int = 1):
        check_in = self.today + timedelta(days=offset)
        with self.captureOnCommitCallbacks(execute=True):
            return message_bus.handle_command(
                CreateBookingCommand(
                    room_id=self.room.id,
                    guest_id=self.guest.pk,
                    check_in=check_in,
                    check_out=check_in + timedelta(days=nights),
                )
            )

    def _apply(self, booking, transition: Transition, user):
        role = ActorRole.ADMIN if user.is_staff else ActorRole.USER
        with self.captureOnCommitCallbacks(execute=True):
            return message_bus.handle_command(
                TransitionBookingCommand(
                    booking_id=booking.id,
                    actor=Actor(user_id=user.pk, role=role),
                    transition=transition,
                )
            )

    def test_payment_records_pending_earning(self) -> None:
        booking = self._book()

        self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)

        earning = Earning.objects.get(booking_id=booking.id)
        self.assertEqual(earning.status, Earning.Status.PENDING)
        self.assertEqual(earning.host_id, self.host.pk)
        self.assertEqual(earning.amount, Decimal("3850.00"))
        self.assertEqual(earning.platform_fee, Decimal("385.00"))
        self.assertEqual(earning.host_payout, Decimal("3465.00"))
        self.assertEqual(earning.available_date, self.today + timedelta(days=12))

    def test_unpaid_booking_has_no_earning(self) -> None:
        booking = self._book()

        self.assertIsNone(record_earning(booking.id))
        self.assertFalse(Earning.objects.exists())

    def test_recording_twice_keeps_one_entry(self) -> None:
        booking = self._book()
        self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)

        first = Earning.objects.get(booking_id=booking.id)
        again = record_earning(booking.id)

        self.assertEqual(again.pk, first.pk)
        self.assertEqual(Earning.objects.count(), 1)

    def test_completion_makes_earning_available(self) -> None:
        booking = self._book()
        self._apply(booking, Transition.CONFIRM, self.host)

        self._apply(booking, Transition.COMPLETE, self.admin)

        earning = Earning.objects.get(booking_id=booking.id)
        self.assertEqual(earning.status, Earning.Status.AVAILABLE)
        self.assertEqual(earning.amount, Decimal("3850.00"))

    def test_host_cancellation_withdraws_earning(self) -> None:
        booking = self._book()
        self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)

        self._apply(booking, Transition.CANCEL, self.host)

        self.assertFalse(Earning.objects.filter(booking_id=booking.id).exists())
        self.assertEqual(Booking.objects.get(pk=booking.id).payment_status, Booking.PaymentStatus.REFUNDED)

    def test_half_refund_shrinks_earning(self) -> None:
        booking = self._book(offset=5)
        self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)

        self._apply(booking, Transition.CANCEL, self.guest)

        row = Booking.objects.get(pk=booking.id)
        self.assertEqual(row.refund_amount, Decimal("1925.00"))
        earning = Earning.objects.get(booking_id=booking.id)
        self.assertEqual(earning.amount, Decimal("1925.00"))
        self.assertEqual(earning.platform_fee, Decimal("192.50"))
        self.assertEqual(earning.host_payout, Decimal("1732.50"))

    def test_paid_out_earning_survives_refund(self) -> None:
        booking = self._book()
        self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)
        earning = Earning.objects.get(booking_id=booking.id)
        earning.mark_paid_out("PO-1")

        self._apply(booking, Transition.CANCEL, self.admin)

        earning.refresh_from_db()
        self.assertEqual(earning.status, Earning.Status.PAID_OUT)
        self.assertEqual(earning.amount, Decimal("3850.00"))

    def test_release_due_earnings(self) -> None:
        due = self._book(offset=2)
        later = self._book(offset=20)
        for booking in (due, later):
            self._apply(booking, Transition.MARK_PAYMENT_RECEIVED, self.host)

        released = release_due_earnings(today=self.today + timedelta(days=4))

        self.assertEqual(released, 1)
        self.assertEqual(Earning.objects.get(booking_id=due.id).status, Earning.Status.AVAILABLE)
        self.assertEqual(Earning.objects.get(booking_id=later.id).status, Earning.Status.PENDING)

    def test_summary_totals_by_status(self) -> None:
        pending = self._book(offset=10)
        done = self._book(offset=15)
        self._apply(pending, Transition.MARK_PAYMENT_RECEIVED, self.host)
        self._apply(done, Transition.CONFIRM, self.host)
        self._apply(done, Transition.COMPLETE, self.admin)

        summary = earnings_summary(self.host.pk)

        self.assertEqual(summary["pending"], Decimal("3465.00"))
        self.assertEqual(summary["available"], Decimal("3465.00"))
        self.assertEqual(summary["paid_out"], Decimal("0.00"))
        self.assertEqual(summary["count"], 2)


class EarningsAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user("host", "host@example.com", "HostPass123")
        self.other_host = User.objects.create_user("other", "other@example.com", "HostPass123")
        self.guest = User.objects.create_user("guest", "guest@example.com", "GuestPass123")
        today = utc_now().date()
        for owner in (self.host, self.other_host):
            room = Room.objects.create(
                host=owner,
                title=f"Room of {owner.username}",
                base_price=Decimal("1000.00"),
                status=Room.Status.APPROVED,
                is_published=True,
            )
            booking = Booking.objects.create(
                room=room,
                guest=self.guest,
                host=owner,
                room_type=room.room_type,
                check_in=today + timedelta(days=3),
                check_out=today + timedelta(days=4),
                total_price=Decimal("1100.00"),
                payment_status=Booking.PaymentStatus.PAID,
                paid_amount=Decimal("1100.00"),
            )
            record_earning(booking.id)

    def test_host_sees_only_own_earnings(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("earning-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["room_title"], "Room of host")
        self.assertEqual(response.data[0]["host_payout"], "990.00")

    def test_summary_endpoint(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("earning-summary"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["pending"], "990.00")
        self.assertEqual(response.data["count"], 1)

    def test_status_filter(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("earning-list"), {"status": "available"})

        self.assertEqual(response.data, [])

    def test_anonymous_is_refused(self) -> None:
        response = self.client.get(reverse("earning-list"))
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
