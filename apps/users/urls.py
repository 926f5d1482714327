"""URL declarations for team account management."""

from __future__ import annotations

from django.urls import path, include  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import TeamUserViewSet

router = SimpleRouter()
router.register(r'', TeamUserViewSet, basename='team-user')

urlpatterns = [
    path('', include(router.urls)),
]
