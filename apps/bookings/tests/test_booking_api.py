"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import BookedDay, Booking
from apps.rooms.models import Room, RoomBlockedDate
from shared.domain.calendar import utc_now

User = get_user_model()


class BookingAPITests(APITestCase):
    """Создание, конфликты, переходы и отмена бронирований."""

    def setUp(self) -> None:
        self.guest = User.objects.create_user("guest", "guest@example.com", "GuestPass123")
        self.host = User.objects.create_user("host", "host@example.com", "HostPass123")
        self.stranger = User.objects.create_user("stranger", "stranger@example.com", "StrangerPass123")
        self.admin = User.objects.create_user("admin", "admin@example.com", "AdminPass123", is_staff=True)
        self.room = Room.objects.create(
            host=self.host,
            title="Sunny loft",
            room_type=Room.RoomType.STAY,
            base_price=Decimal("3500.00"),
            max_guests=4,
            status=Room.Status.APPROVED,
            is_published=True,
        )
        self.today = utc_now().date()
        self.client.force_authenticate(self.guest)
        self.list_url = reverse("booking-list")

    def _payload(self, offset: int, nights: int, **extra) -> dict:
        check_in = self.today + timedelta(days=offset)
        payload = {
            "room": str(self.room.id),
            "check_in": str(check_in),
            "check_out": str(check_in + timedelta(days=nights)),
            "guest_count": 2,
        }
        payload.update(extra)
        return payload

    def _create(self, offset: int = 10, nights: int = 2, **extra):
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(offset, nights, **extra), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["id"]

    def _post_as(self, user, name: str, booking_id, data=None):
        self.client.force_authenticate(user)
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post(reverse(name, args=[booking_id]), data or {}, format="json")

    # ----- create -----

    def test_guest_can_create_booking(self) -> None:
        booking_id = self._create()

        booking = Booking.objects.get(pk=booking_id)
        self.assertEqual(booking.guest, self.guest)
        self.assertEqual(booking.host, self.host)
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.total_price, Decimal("7700.00"))
        # check-in, the night between and the check-out day
        self.assertEqual(BookedDay.objects.filter(booking=booking).count(), 3)
        self.assertEqual(sorted(m.to[0] for m in mail.outbox), ["guest@example.com", "host@example.com"])

    def test_price_breakdown_is_returned(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(self.list_url, self._payload(10, 2), format="json")

        breakdown = response.data["price_breakdown"]
        self.assertEqual(breakdown["units"], 2)
        self.assertEqual(breakdown["subtotal"], "7000.00")
        self.assertEqual(breakdown["service_fee"], "700.00")
        self.assertEqual(breakdown["total"], "7700.00")
        self.assertTrue(response.data["is_cancellable"])

    def test_overlap_is_a_conflict(self) -> None:
        self._create(10, 3)

        response = self.client.post(self.list_url, self._payload(12, 3), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "ConflictError")
        self.assertEqual(
            response.data["dates"],
            [str(self.today + timedelta(days=12)), str(self.today + timedelta(days=13))],
        )
        self.assertEqual(Booking.objects.count(), 1)

    def test_check_out_day_stays_blocked(self) -> None:
        self._create(10, 2)

        same_day = self.client.post(self.list_url, self._payload(12, 2), format="json")
        self.assertEqual(same_day.status_code, status.HTTP_409_CONFLICT, same_day.data)

        self._create(13, 2)
        self.assertEqual(Booking.objects.count(), 2)

    def test_host_blocked_day_prevents_booking(self) -> None:
        RoomBlockedDate.objects.create(room=self.room, day=self.today + timedelta(days=11), reason="Repairs")

        response = self.client.post(self.list_url, self._payload(10, 3), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)

    def test_reversed_dates_are_rejected(self) -> None:
        payload = self._payload(10, 2)
        payload["check_in"], payload["check_out"] = payload["check_out"], payload["check_in"]

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["field"], "check_out")

    def test_guest_count_over_capacity(self) -> None:
        response = self.client.post(self.list_url, self._payload(10, 2, guest_count=9), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["field"], "guest_count")

    def test_host_cannot_book_own_room(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.post(self.list_url, self._payload(10, 2), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_unknown_room_is_not_found(self) -> None:
        payload = self._payload(10, 2, room="00000000-0000-0000-0000-000000000000")

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_anonymous_cannot_book(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.post(self.list_url, self._payload(10, 2), format="json")

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    # ----- transitions -----

    def test_host_confirms_booking(self) -> None:
        booking_id = self._create()
        mail.outbox.clear()

        response = self._post_as(self.host, "booking-confirm", booking_id)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertEqual([m.to[0] for m in mail.outbox], ["guest@example.com"])

    def test_guest_cannot_confirm(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.guest, "booking-confirm", booking_id)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_stranger_gets_forbidden_not_found(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.stranger, "booking-cancel", booking_id)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_missing_booking_is_not_found(self) -> None:
        response = self._post_as(self.host, "booking-confirm", "00000000-0000-0000-0000-000000000000")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_host_rejects_with_reason(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.host, "booking-reject", booking_id, {"reason": "Maintenance"})

        self.assertEqual(response.data["status"], "rejected")
        self.assertEqual(response.data["cancellation_details"]["reason"], "Maintenance")
        self.assertFalse(BookedDay.objects.filter(booking_id=booking_id).exists())

    def test_mark_paid_confirms_pay_at_property(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.host, "booking-mark-paid", booking_id)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertEqual(response.data["payment_status"], "paid")
        self.assertEqual(response.data["payment_details"]["amount"], "7700.00")

    def test_mark_paid_refused_for_card_payments(self) -> None:
        booking_id = self._create(payment_method="card")

        response = self._post_as(self.host, "booking-mark-paid", booking_id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "InvalidStateTransition")
        self.assertEqual(response.data["current_status"], "payment_method card")
        self.assertEqual(response.data["allowed_from"], ["payment_method property"])

    def test_host_cannot_complete_before_check_out(self) -> None:
        booking_id = self._create()
        self._post_as(self.host, "booking-confirm", booking_id)

        response = self._post_as(self.host, "booking-complete", booking_id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_generic_transition_endpoint(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.host, "booking-transition", booking_id, {"transition": "confirm"})
        self.assertEqual(response.data["status"], "confirmed")

        again = self._post_as(self.host, "booking-transition", booking_id, {"transition": "confirm"})
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST, again.data)
        self.assertEqual(again.data["current_status"], "confirmed")

        unknown = self._post_as(self.host, "booking-transition", booking_id, {"transition": "archive"})
        self.assertEqual(unknown.status_code, status.HTTP_400_BAD_REQUEST, unknown.data)

    # ----- cancel -----

    def test_guest_can_cancel_booking(self) -> None:
        booking_id = self._create()

        response = self._post_as(self.guest, "booking-cancel", booking_id, {"reason": "Plans changed"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(response.data["cancellation_details"]["cancelled_by"], "user")
        self.assertFalse(BookedDay.objects.filter(booking_id=booking_id).exists())

        # the released days can be booked again
        self.client.force_authenticate(self.guest)
        self._create()

    def test_cancel_twice_is_invalid(self) -> None:
        booking_id = self._create()
        self._post_as(self.guest, "booking-cancel", booking_id)

        response = self._post_as(self.host, "booking-cancel", booking_id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["current_status"], "cancelled")

    def test_can_cancel_quote(self) -> None:
        booking_id = self._create()
        self._post_as(self.host, "booking-mark-paid", booking_id)
        self.client.force_authenticate(self.guest)

        response = self.client.get(reverse("booking-can-cancel", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["can_cancel"])
        self.assertEqual(response.data["refund_percentage"], "100.00")
        self.assertEqual(response.data["refund_amount"], "7700.00")

    def test_can_cancel_is_party_only(self) -> None:
        booking_id = self._create()
        self.client.force_authenticate(self.stranger)

        response = self.client.get(reverse("booking-can-cancel", args=[booking_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    # ----- list / delete -----

    def test_list_is_scoped_to_parties(self) -> None:
        booking_id = self._create()

        for user, expected in ((self.guest, 1), (self.host, 1), (self.stranger, 0), (self.admin, 1)):
            self.client.force_authenticate(user)
            response = self.client.get(self.list_url)
            self.assertEqual(len(response.data), expected, user.username)

        self.client.force_authenticate(self.stranger)
        detail = self.client.get(reverse("booking-detail", args=[booking_id]))
        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_filters_by_status_and_role(self) -> None:
        first = self._create(10, 2)
        self._create(20, 2)
        self._post_as(self.host, "booking-confirm", first)
        self.client.force_authenticate(self.guest)

        confirmed = self.client.get(self.list_url, {"status": "confirmed"})
        as_host = self.client.get(self.list_url, {"role": "host"})

        self.assertEqual([row["id"] for row in confirmed.data], [first])
        self.assertEqual(as_host.data, [])

    def test_admin_deletes_non_confirmed_booking(self) -> None:
        pending = self._create(10, 2)
        confirmed = self._create(20, 2)
        self._post_as(self.host, "booking-confirm", confirmed)

        self.client.force_authenticate(self.host)
        forbidden = self.client.delete(reverse("booking-detail", args=[pending]))
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        deleted = self.client.delete(reverse("booking-detail", args=[pending]))
        refused = self.client.delete(reverse("booking-detail", args=[confirmed]))

        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(refused.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Booking.objects.count(), 1)
        self.assertTrue(Booking.objects.filter(pk=confirmed).exists())
        self.assertFalse(BookedDay.objects.filter(booking_id=pending).exists())
