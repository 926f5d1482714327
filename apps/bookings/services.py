"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Mapping

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.accommodations.models import Accommodation, BlockedDate
from shared.domain.exceptions import ConflictError, ValidationError
from shared.domain.value_objects import DateRange

from .domain.availability import AccommodationCalendar, OccupiedRange
from .domain.financials import confirmation_problems
from .models import Booking

logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()

FINANCIAL_INPUTS = ("gross_value", "commission", "bank_fee", "vat")

CONFLICT_MESSAGES = {
    OccupiedRange.BOOKING: "The accommodation is already booked for these dates",
    OccupiedRange.BLOCKED: "The accommodation is blocked for these dates",
}


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def stay_dates(check_in: date, check_out: date) -> DateRange:
    try:
        return DateRange(check_in, check_out)
    except ValueError as exc:
        raise ValidationError("Check-out must be after check-in") from exc


# ---------------------------------------------------------------------------
# Availability
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    conflicts: list[OccupiedRange] = field(default_factory=list)


def load_calendar(
    accommodation_id: int,
    *,
    window: DateRange | None = None,
    exclude_booking_id: int | None = None,
) -> AccommodationCalendar:
    """Occupied ranges of one accommodation, optionally only those touching ``window``."""

    bookings_qs = Booking.objects.filter(
        accommodation_id=accommodation_id,
        status=Booking.Status.CONFIRMED,
    )
    blocked_qs = BlockedDate.objects.filter(accommodation_id=accommodation_id)

    if window is not None:
        bookings_qs = bookings_qs.filter(Q(check_in__lt=window.end_date) & Q(check_out__gt=window.start_date))
        blocked_qs = blocked_qs.filter(Q(start_date__lt=window.end_date) & Q(end_date__gt=window.start_date))
    if exclude_booking_id is not None:
        bookings_qs = bookings_qs.exclude(pk=exclude_booking_id)

    occupied = [
        OccupiedRange(check_in, check_out, OccupiedRange.BOOKING, pk)
        for pk, check_in, check_out in bookings_qs.order_by("check_in", "id").values_list("pk", "check_in", "check_out")
    ]
    occupied += [
        OccupiedRange(start, end, OccupiedRange.BLOCKED, pk)
        for pk, start, end in blocked_qs.order_by("start_date", "id").values_list("pk", "start_date", "end_date")
    ]
    return AccommodationCalendar(accommodation_id=accommodation_id, occupied=occupied)


def check_availability(
    accommodation_id: int,
    check_in: date,
    check_out: date,
    *,
    short_circuit: bool = False,
    exclude_booking_id: int | None = None,
) -> AvailabilityResult:
    """Whether ``[check_in, check_out)`` is free.

    With ``short_circuit`` the search stops at the first conflict; otherwise
    every conflicting range is returned. Read only.
    """

    dates = stay_dates(check_in, check_out)
    calendar = load_calendar(accommodation_id, window=dates, exclude_booking_id=exclude_booking_id)
    if short_circuit:
        conflict = calendar.first_conflict(dates)
        return AvailabilityResult(conflict is None, [conflict] if conflict else [])
    conflicts = calendar.conflicts_with(dates)
    return AvailabilityResult(not conflicts, conflicts)


def occupied_ranges(accommodation_id: int) -> list[OccupiedRange]:
    """Every confirmed stay and blocked period, for the public calendar."""

    return load_calendar(accommodation_id).occupied


def ensure_accommodation_is_available(
    accommodation_id: int,
    check_in: date,
    check_out: date,
    *,
    exclude_booking_id: int | None = None,
) -> None:
    """Raise ConflictError when the stay overlaps a confirmed booking or a block."""

    result = check_availability(
        accommodation_id,
        check_in,
        check_out,
        short_circuit=True,
        exclude_booking_id=exclude_booking_id,
    )
    if not result.available:
        conflict = result.conflicts[0]
        logger.info(
            "Rejected stay %s - %s at accommodation %s: overlaps %s %s",
            check_in,
            check_out,
            accommodation_id,
            conflict.source,
            conflict.reference_id,
        )
        raise ConflictError(CONFLICT_MESSAGES[conflict.source])


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def ensure_can_confirm(gross_value, platform) -> None:
    problems = confirmation_problems(gross_value, platform)
    if problems:
        raise ValidationError("; ".join(problems))


def create_booking(
    *,
    accommodation: Accommodation,
    check_in: date,
    check_out: date,
    guests: int,
    primary_name: str,
    nationality: str = "",
    additional_names: str = "",
    notes: str = "",
    status: str = Booking.Status.PENDING,
    gross_value=None,
    municipal_tax=None,
    commission=None,
    bank_fee=None,
    vat=None,
    platform: str = "",
) -> Booking:
    """Insert a booking after checking that its dates are free.

    The check and the insert share one transaction that holds a row lock on
    the accommodation, so concurrent creations for the same accommodation
    are serialised and cannot both pass the check.
    """

    stay_dates(check_in, check_out)
    if status == Booking.Status.CONFIRMED:
        ensure_can_confirm(gross_value, platform)

    with transaction.atomic():
        _lock_queryset_if_possible(Accommodation.objects.filter(pk=accommodation.pk)).get()
        ensure_accommodation_is_available(accommodation.pk, check_in, check_out)

        booking = Booking(
            accommodation=accommodation,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            primary_name=primary_name,
            nationality=nationality,
            additional_names=additional_names,
            notes=notes,
            status=status,
            gross_value=gross_value,
            municipal_tax=municipal_tax,
            commission=commission,
            bank_fee=bank_fee,
            vat=vat,
            platform=platform,
        )
        booking.refresh_net_values()
        booking.save()

    logger.info(
        "Created %s booking %s at accommodation %s (%s - %s)",
        booking.status,
        booking.pk,
        accommodation.pk,
        check_in,
        check_out,
    )
    return booking


@dataclass
class BookingPatch:
    """Partial update of a booking. Slots left as UNSET are not touched."""

    check_in: Any = UNSET
    check_out: Any = UNSET
    guests: Any = UNSET
    nationality: Any = UNSET
    primary_name: Any = UNSET
    additional_names: Any = UNSET
    notes: Any = UNSET
    status: Any = UNSET
    gross_value: Any = UNSET
    municipal_tax: Any = UNSET
    commission: Any = UNSET
    bank_fee: Any = UNSET
    vat: Any = UNSET
    platform: Any = UNSET

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "BookingPatch":
        names = {f.name for f in fields(cls)}
        return cls(**{name: value for name, value in data.items() if name in names})

    def supplied(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def touches(self, *names: str) -> bool:
        return any(getattr(self, name) is not UNSET for name in names)


def update_booking(booking: Booking, patch: BookingPatch) -> Booking:
    """Apply ``patch``; ``updated_at`` is refreshed on every call.

    Moving to ``confirmed`` requires a positive gross value and a platform.
    Touching any financial input recomputes both net values in the same save.
    """

    changes = patch.supplied()

    def merged(name: str):
        return changes.get(name, getattr(booking, name))

    stay_dates(merged("check_in"), merged("check_out"))
    if changes.get("status") == Booking.Status.CONFIRMED:
        ensure_can_confirm(merged("gross_value"), merged("platform"))

    with transaction.atomic():
        for name, value in changes.items():
            setattr(booking, name, value)
        if patch.touches(*FINANCIAL_INPUTS):
            booking.refresh_net_values()
        booking.save()

    logger.info("Updated booking %s (%s)", booking.pk, ", ".join(sorted(changes)) or "no fields")
    return booking


def delete_booking(booking: Booking) -> None:
    booking_id = booking.pk
    booking.delete()
    logger.info("Deleted booking %s", booking_id)
