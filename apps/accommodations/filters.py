"""FilterSet definitions for blocked periods."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import BlockedDate


class BlockedDateFilterSet(django_filters.FilterSet):
    accommodation_id = django_filters.NumberFilter(field_name="accommodation_id")
    start = django_filters.DateFilter(field_name="end_date", lookup_expr="gt")
    end = django_filters.DateFilter(field_name="start_date", lookup_expr="lt")

    class Meta:
        model = BlockedDate
        fields: list[str] = []
