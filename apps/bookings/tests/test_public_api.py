"""API tests for the public booking form, availability check and team feed."""

from __future__ import annotations

from datetime import date, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.accommodations.models import BlockedDate
from apps.bookings.models import Booking
from apps.users.tests.factories import bearer_for, make_accommodation, make_admin, make_team_member


def confirmed(accommodation, check_in: date, check_out: date, name: str = "Ana Costa") -> Booking:
    return Booking.objects.create(
        accommodation=accommodation,
        check_in=check_in,
        check_out=check_out,
        guests=2,
        primary_name=name,
        status=Booking.Status.CONFIRMED,
    )


class CheckAvailabilityAPITests(APITestCase):
    def setUp(self) -> None:
        self.loft = make_accommodation("Test Loft")
        self.url = reverse("check-availability")
        confirmed(self.loft, date(2025, 8, 1), date(2025, 8, 5))
        BlockedDate.objects.create(accommodation=self.loft, start_date=date(2025, 8, 20), end_date=date(2025, 8, 22))

    def test_free_dates(self) -> None:
        response = self.client.post(
            self.url,
            {"accommodationName": "Test Loft", "checkIn": "2025-08-05", "checkOut": "2025-08-10"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["available"])
        self.assertEqual(response.data["accommodation"], "Test Loft")
        self.assertEqual(
            response.data["bookedDates"],
            [
                {"checkIn": "2025-08-01", "checkOut": "2025-08-05"},
                {"checkIn": "2025-08-20", "checkOut": "2025-08-22"},
            ],
        )

    def test_taken_dates(self) -> None:
        response = self.client.post(
            self.url,
            {"accommodation": "test loft", "checkIn": "2025-08-04", "checkOut": "2025-08-21"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["available"])
        self.assertEqual(len(response.data["conflicts"]), 2)

    def test_without_dates_only_calendar_is_meaningful(self) -> None:
        response = self.client.post(self.url, {"accommodationId": self.loft.pk}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["available"])
        self.assertEqual(len(response.data["bookedDates"]), 2)

    def test_unknown_accommodation(self) -> None:
        response = self.client.post(self.url, {"accommodationName": "Nowhere Hut"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Invalid accommodation")

    def test_inverted_dates(self) -> None:
        response = self.client.post(
            self.url,
            {"accommodationName": "Test Loft", "checkIn": "2025-08-10", "checkOut": "2025-08-10"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "checkOut must be after checkIn")


class BookingRequestAPITests(APITestCase):
    def setUp(self) -> None:
        self.loft = make_accommodation("Test Loft", max_guests=3)
        self.url = reverse("booking-request")

    def _payload(self, **extra) -> dict:
        payload = {
            "accommodation_id": self.loft.pk,
            "check_in": "2025-09-01",
            "check_out": "2025-09-04",
            "guests": 2,
            "primary_name": "Jean Dupont",
            "nationality": "FR",
        }
        payload.update(extra)
        return payload

    def test_request_lands_as_pending(self) -> None:
        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        booking = Booking.objects.get(pk=response.data["id"])
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.primary_name, "Jean Dupont")

    def test_status_and_financials_cannot_be_injected(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(status="confirmed", gross_value="1.00", platform="Direct"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking = Booking.objects.get(pk=response.data["id"])
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertIsNone(booking.gross_value)

    def test_taken_dates_are_a_conflict(self) -> None:
        confirmed(self.loft, date(2025, 9, 2), date(2025, 9, 6))

        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_too_many_guests(self) -> None:
        response = self.client.post(self.url, self._payload(guests=4), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("guests", response.data["details"])


class TeamBookingsFeedTests(APITestCase):
    def setUp(self) -> None:
        self.loft = make_accommodation("Test Loft")
        self.cabin = make_accommodation("Test Cabin")
        self.url = reverse("team-bookings")
        today = timezone.localdate()
        self.later = confirmed(self.loft, today + timedelta(days=10), today + timedelta(days=12), "Later")
        self.current = confirmed(self.loft, today - timedelta(days=1), today + timedelta(days=2), "Current")
        self.departing = confirmed(self.loft, today - timedelta(days=3), today, "Departing")
        confirmed(self.loft, today - timedelta(days=9), today - timedelta(days=5), "Past")
        confirmed(self.cabin, today + timedelta(days=1), today + timedelta(days=3), "Elsewhere")
        Booking.objects.create(
            accommodation=self.loft,
            check_in=today + timedelta(days=20),
            check_out=today + timedelta(days=22),
            guests=1,
            primary_name="Pending",
        )

    def test_feed_lists_upcoming_confirmed_stays_in_scope(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(make_team_member(accommodations=[self.loft])))

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [row["primary_name"] for row in response.data["bookings"]]
        self.assertEqual(names, ["Departing", "Current", "Later"])
        self.assertEqual(response.data["bookings"][0]["accommodation_name"], "Test Loft")
        self.assertNotIn("gross_value", response.data["bookings"][0])

    def test_admin_sees_every_accommodation(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(make_admin()))

        response = self.client.get(self.url)

        names = {row["primary_name"] for row in response.data["bookings"]}
        self.assertTrue({"Departing", "Current", "Later", "Elsewhere"} <= names)
        self.assertNotIn("Pending", names)

    def test_requires_a_session(self) -> None:
        self.assertEqual(self.client.get(self.url).status_code, status.HTTP_401_UNAUTHORIZED)
