"""Team account API views (administrators only)."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import viewsets  # type: ignore

from .permissions import IsAdmin
from .serializers import TeamUserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class TeamUserViewSet(viewsets.ModelViewSet):
    """CRUD over team accounts.

    Deleting an account also deletes its sessions, so the member is logged
    out everywhere.
    """

    serializer_class = TeamUserSerializer
    permission_classes = [IsAdmin]
    queryset = User.objects.filter(role=User.RoleChoices.TEAM).prefetch_related("allowed_accommodations")

    def perform_create(self, serializer):  # type: ignore
        user = serializer.save()
        logger.info("Created team user %s", user.pk)

    def perform_destroy(self, instance):  # type: ignore
        logger.info("Deleting team user %s", instance.pk)
        instance.delete()
