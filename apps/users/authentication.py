"""DRF authentication backed by the deployment's session resolver."""

from __future__ import annotations

from rest_framework.authentication import BaseAuthentication  # type: ignore

from .identity import get_resolver


class SessionResolverAuthentication(BaseAuthentication):
    """Sets ``request.user`` to an :class:`~apps.users.identity.Identity`.

    A missing or unresolvable credential leaves the request anonymous, so
    public endpoints keep working and gated ones answer 401.
    """

    def authenticate(self, request):  # type: ignore
        return get_resolver().authenticate(request)

    def authenticate_header(self, request) -> str:  # type: ignore
        return 'Bearer realm="api"'
