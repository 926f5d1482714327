"""
Accommodation Calendar

The consistency boundary for preventing double bookings. Every check of
whether a stay can be accepted goes through this aggregate.

Occupied ranges are confirmed bookings and blocked periods. Pending and
cancelled bookings never occupy dates.

Strategy (Defense in Depth):
1. Domain validation: first_conflict() finds an overlap
2. Pessimistic locking: the accommodation row is locked (SELECT FOR UPDATE)
   for the whole check-then-insert transaction
3. Database constraint: check_out > check_in on every stored row
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List

from shared.domain.value_objects import DateRange, overlaps


@dataclass(frozen=True)
class OccupiedRange:
    """
    A stored date range that blocks new confirmed stays.

    Stored rows are not re-validated here, so this keeps raw dates instead
    of a DateRange.
    """
    start_date: date
    end_date: date
    source: str  # "booking" or "blocked"
    reference_id: int | None = None

    BOOKING = "booking"
    BLOCKED = "blocked"

    def overlaps_with(self, dates: DateRange) -> bool:
        return overlaps(self.start_date, self.end_date, dates.start_date, dates.end_date)


@dataclass
class AccommodationCalendar:
    """
    Occupancy of one accommodation.

    Usage:
        calendar = load_calendar(accommodation_id)
        conflict = calendar.first_conflict(DateRange(check_in, check_out))
        if conflict is not None:
            raise ConflictError(...)
    """

    accommodation_id: int
    occupied: List[OccupiedRange] = field(default_factory=list)

    def first_conflict(self, dates: DateRange) -> OccupiedRange | None:
        """Stops at the first overlap; used on the creation path."""
        return next((occupied for occupied in self.occupied if occupied.overlaps_with(dates)), None)

    def conflicts_with(self, dates: DateRange) -> List[OccupiedRange]:
        """Every occupied range overlapping ``dates``."""
        return [occupied for occupied in self.occupied if occupied.overlaps_with(dates)]

    def __str__(self):
        return f"AccommodationCalendar(accommodation={self.accommodation_id}, occupied={len(self.occupied)})"
