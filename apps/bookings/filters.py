"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filters for the admin and team booking lists."""

    accommodation_id = django_filters.NumberFilter(field_name="accommodation_id")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    platform = django_filters.CharFilter(field_name="platform", lookup_expr="iexact")
    # Stays overlapping [start, end)
    start = django_filters.DateFilter(field_name="check_out", lookup_expr="gt")
    end = django_filters.DateFilter(field_name="check_in", lookup_expr="lt")

    class Meta:
        model = Booking
        fields: list[str] = []
