"""Double-booking protection on the creation path.

Two simultaneous requests for overlapping dates must not both pass the
availability check. The check and the insert run in one transaction that
first locks the accommodation row: SELECT ... FOR UPDATE on PostgreSQL, an
IMMEDIATE write transaction on SQLite.
"""

from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal
from unittest import mock

from django.db import connection, transaction
from django.test import TestCase, TransactionTestCase

from apps.accommodations.models import Accommodation
from apps.bookings import services
from apps.bookings.models import Booking
from apps.users.tests.factories import make_accommodation
from shared.domain.exceptions import ConflictError

CONFIRMED = {
    "status": Booking.Status.CONFIRMED,
    "gross_value": Decimal("200.00"),
    "platform": "Airbnb",
}


class CreationLockTests(TestCase):
    def test_lock_is_taken_before_the_availability_check(self) -> None:
        loft = make_accommodation("Test Loft")
        calls = mock.Mock()
        real_lock = services._lock_queryset_if_possible
        real_check = services.ensure_accommodation_is_available

        def lock(queryset):
            calls.lock(queryset.model, transaction.get_connection().in_atomic_block)
            return real_lock(queryset)

        def check(*args, **kwargs):
            calls.check(*args)
            return real_check(*args, **kwargs)

        with mock.patch.object(services, "_lock_queryset_if_possible", side_effect=lock), mock.patch.object(
            services, "ensure_accommodation_is_available", side_effect=check
        ):
            services.create_booking(
                accommodation=loft,
                check_in=date(2025, 7, 1),
                check_out=date(2025, 7, 3),
                guests=2,
                primary_name="Ana Costa",
                **CONFIRMED,
            )

        self.assertEqual(
            calls.mock_calls,
            [
                mock.call.lock(Accommodation, True),
                mock.call.check(loft.pk, date(2025, 7, 1), date(2025, 7, 3)),
            ],
        )

    def test_failed_check_inserts_nothing(self) -> None:
        loft = make_accommodation("Test Loft")
        services.create_booking(
            accommodation=loft,
            check_in=date(2025, 7, 1),
            check_out=date(2025, 7, 5),
            guests=2,
            primary_name="First",
            **CONFIRMED,
        )

        with self.assertRaises(ConflictError):
            services.create_booking(
                accommodation=loft,
                check_in=date(2025, 7, 3),
                check_out=date(2025, 7, 6),
                guests=2,
                primary_name="Second",
                **CONFIRMED,
            )

        self.assertEqual(list(Booking.objects.filter(accommodation=loft).values_list("primary_name", flat=True)), ["First"])


class ConcurrentCreationTests(TransactionTestCase):
    def test_only_one_of_two_overlapping_requests_wins(self) -> None:
        loft = Accommodation.objects.create(name="Race Loft", max_guests=2)
        barrier = threading.Barrier(2)
        outcomes: list[str] = []
        outcomes_lock = threading.Lock()

        def attempt(name: str) -> None:
            try:
                barrier.wait()
                services.create_booking(
                    accommodation=loft,
                    check_in=date(2025, 7, 1),
                    check_out=date(2025, 7, 4),
                    guests=2,
                    primary_name=name,
                    **CONFIRMED,
                )
                result = "created"
            except ConflictError:
                result = "conflict"
            except Exception as exc:  # noqa: BLE001 - reported through the assertion below
                result = type(exc).__name__
            finally:
                connection.close()
            with outcomes_lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(name,)) for name in ("First", "Second")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(sorted(outcomes), ["conflict", "created"])
        self.assertEqual(Booking.objects.filter(accommodation=loft).count(), 1)
