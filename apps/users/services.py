"""Account and session services used by the login endpoints."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from django.contrib.auth import authenticate  # type: ignore

from shared.domain.exceptions import AuthenticationError, ValidationError

from .identity import get_resolver
from .models import AuthSession, CustomUser

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def login_account(username: str, password: str, *, kind: str) -> tuple[CustomUser, str]:
    """Check credentials for the given portal and open a session.

    Returns the user and the raw session token.
    """

    if not get_resolver().supports_password_login:
        raise ValidationError("Password login is disabled for this deployment")

    user = authenticate(username=username, password=password)
    if user is None:
        logger.info("Failed %s login for %s", kind, username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    if kind == AuthSession.Kind.ADMIN and not user.is_admin:
        logger.info("Non-admin %s tried the admin login", username)
        raise AuthenticationError(INVALID_CREDENTIALS)
    if kind == AuthSession.Kind.TEAM and user.role != CustomUser.RoleChoices.TEAM:
        logger.info("Non-team account %s tried the team login", username)
        raise AuthenticationError(INVALID_CREDENTIALS)

    ttl = session_ttl(kind)
    _, token = AuthSession.issue(user, kind, ttl)
    logger.info("Opened %s session for user %s", kind, user.pk)
    return user, token


def session_ttl(kind: str):
    identity_settings = settings.IDENTITY
    if kind == AuthSession.Kind.ADMIN:
        return identity_settings["ADMIN_SESSION_TTL"]
    return identity_settings["TEAM_SESSION_TTL"]


def close_session(token: str | None) -> bool:
    if not token:
        return False
    deleted, _ = AuthSession.objects.filter(token_digest=AuthSession.digest(token)).delete()
    return bool(deleted)


def purge_expired_sessions() -> int:
    deleted, _ = AuthSession.objects.expired().delete()
    return deleted
