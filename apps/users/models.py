"""User domain models for the booking admin.

Two kinds of accounts exist: administrators, who see every accommodation,
and team members, who are limited to the accommodations they are assigned
to. Both log in with a username and password and receive an opaque session
token that is stored server-side as a SHA-256 digest.
"""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta
from typing import Any

from django.contrib.auth.models import AbstractUser, UserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(UserManager):
    """Superusers created from the command line are administrators."""

    use_in_migrations = True

    def create_superuser(self, username: str, email: str | None = None, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("role", CustomUser.RoleChoices.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Admin or team account."""

    class RoleChoices(models.TextChoices):
        ADMIN = "admin", _("Administrator")
        TEAM = "team", _("Team member")

    name = models.CharField(_("Display name"), max_length=150, blank=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.TEAM,
    )
    allowed_accommodations = models.ManyToManyField(
        "accommodations.Accommodation",
        blank=True,
        related_name="team_members",
        help_text=_("Accommodations a team member may see and manage."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["name", "username"]

    def __str__(self) -> str:
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN or self.is_superuser

    def allowed_accommodation_ids(self) -> list[int]:
        return sorted(self.allowed_accommodations.values_list("id", flat=True))


User = CustomUser


class AuthSessionQuerySet(models.QuerySet):
    def active(self):
        return self.filter(expires_at__gt=timezone.now())

    def expired(self):
        return self.filter(expires_at__lte=timezone.now())


class AuthSession(models.Model):
    """Server-side session behind an opaque bearer/cookie token."""

    class Kind(models.TextChoices):
        ADMIN = "admin", _("Admin console")
        TEAM = "team", _("Team portal")

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="auth_sessions",
    )
    kind = models.CharField(max_length=10, choices=Kind.choices)
    token_digest = models.CharField(max_length=64, unique=True, editable=False)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    objects = AuthSessionQuerySet.as_manager()

    class Meta:
        verbose_name = _("Session")
        verbose_name_plural = _("Sessions")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["expires_at"], name="auth_session_expiry_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.get_kind_display()} session for {self.user_id}"

    @staticmethod
    def digest(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @classmethod
    def issue(cls, user: CustomUser, kind: str, ttl: timedelta) -> tuple["AuthSession", str]:
        """Create a session and return it with the raw token (shown once)."""

        token = secrets.token_urlsafe(32)
        session = cls.objects.create(
            user=user,
            kind=kind,
            token_digest=cls.digest(token),
            expires_at=timezone.now() + ttl,
        )
        return session, token

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at
