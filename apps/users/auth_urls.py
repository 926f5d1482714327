"""URL routing for administrator authentication (namespace: auth)."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .auth_views import AdminLoginView, AdminLogoutView, AdminMeView

app_name = "auth"

urlpatterns = [
    path("login/", AdminLoginView.as_view(), name="login"),
    path("logout/", AdminLogoutView.as_view(), name="logout"),
    path("me/", AdminMeView.as_view(), name="me"),
]
