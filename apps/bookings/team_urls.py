"""Team portal booking feed."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import TeamBookingsView

urlpatterns = [
    path("bookings/", TeamBookingsView.as_view(), name="team-bookings"),
]
