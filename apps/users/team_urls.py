"""URL routing for the team portal session endpoints (namespace: team)."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .auth_views import TeamLoginView, TeamLogoutView, TeamMeView

app_name = "team"

urlpatterns = [
    path("login/", TeamLoginView.as_view(), name="login"),
    path("logout/", TeamLogoutView.as_view(), name="logout"),
    path("me/", TeamMeView.as_view(), name="me"),
]
