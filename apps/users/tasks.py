"""Celery tasks for the users domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from . import services

logger = logging.getLogger(__name__)


@shared_task(name="users.purge_expired_sessions")
def purge_expired_sessions() -> dict[str, int]:
    """Removes admin and team sessions whose expiry has passed."""

    deleted = services.purge_expired_sessions()
    if deleted:
        logger.info("Purged %s expired sessions", deleted)
    return {"deleted": deleted}
