"""URL routing for accommodations, galleries and blocked periods."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import AccommodationView, BlockedDateViewSet, ImageFileView, ImageView

router = SimpleRouter()
router.register(r"blocked-dates", BlockedDateViewSet, basename="blocked-date")

urlpatterns = [
    path("accommodations/", AccommodationView.as_view(), name="accommodation-list"),
    path("images/", ImageView.as_view(), name="image-list"),
    path("images/file/<path:key>", ImageFileView.as_view(), name="image-file"),
    path("", include(router.urls)),
]
