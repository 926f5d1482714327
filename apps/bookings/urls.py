"""URL routing for the booking domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import BookingRequestView, BookingViewSet, CheckAvailabilityView

router = SimpleRouter()
router.register(r"bookings", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
    path("check-availability/", CheckAvailabilityView.as_view(), name="check-availability"),
    path("booking-requests/", BookingRequestView.as_view(), name="booking-request"),
]
