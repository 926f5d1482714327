"""Permission classes for the admin console and the team portal."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _is_admin(user) -> bool:
    return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


def _is_team_or_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    return getattr(user, "is_admin", False) or getattr(user, "is_team", False)


class IsAdmin(permissions.BasePermission):
    """Only administrators."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_admin(request.user)


class IsTeamOrAdmin(permissions.BasePermission):
    """Administrators and team members; scope is enforced by the view."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _is_team_or_admin(request.user)


class IsAdminOrTeamReadOnly(permissions.BasePermission):
    """Team members may read, only administrators may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return _is_team_or_admin(request.user)
        return _is_admin(request.user)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read, only administrators may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return _is_admin(request.user)


class HasAccommodationAccess(permissions.BasePermission):
    """Object-level check against the caller's accommodation scope."""

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        accommodation_id = getattr(obj, "accommodation_id", None)
        if accommodation_id is None:
            return _is_admin(request.user)
        return request.user.can_access(accommodation_id)
