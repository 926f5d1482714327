"""Accommodation domain models."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Accommodation(models.Model):
    """A bookable holiday home."""

    name = models.CharField(max_length=120, unique=True)
    description_pt = models.TextField(blank=True)
    description_en = models.TextField(blank=True)
    description_fr = models.TextField(blank=True)
    description_de = models.TextField(blank=True)
    description_es = models.TextField(blank=True)
    max_guests = models.PositiveSmallIntegerField(
        default=2,
        validators=[MinValueValidator(1)],
    )
    amenities = models.JSONField(default=list, blank=True)
    image_url = models.CharField(
        max_length=500,
        blank=True,
        help_text=_("Cover image used when the gallery is empty."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Accommodation")
        verbose_name_plural = _("Accommodations")
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name

    @property
    def primary_image_url(self) -> str:
        """Primary gallery image, else the first one, else the legacy cover."""

        images = list(self.images.all())
        primary = next((image for image in images if image.is_primary), None)
        if primary is None and images:
            primary = images[0]
        return primary.image_url if primary else self.image_url


class AccommodationImage(models.Model):
    """Gallery photo. At most one per accommodation is primary."""

    accommodation = models.ForeignKey(
        Accommodation,
        on_delete=models.CASCADE,
        related_name="images",
    )
    image_url = models.CharField(max_length=500)
    storage_key = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Object key in the image store; empty for external URLs."),
    )
    display_order = models.PositiveIntegerField(default=0)
    caption = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Accommodation image")
        verbose_name_plural = _("Accommodation images")
        ordering = ["display_order", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["accommodation"],
                condition=models.Q(is_primary=True),
                name="one_primary_image_per_accommodation",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.accommodation_id} [{self.display_order}]"


class BlockedDate(models.Model):
    """Dates an administrator has taken off the market. End date is exclusive."""

    accommodation = models.ForeignKey(
        Accommodation,
        on_delete=models.CASCADE,
        related_name="blocked_dates",
    )
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.CharField(max_length=255, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Blocked period")
        verbose_name_plural = _("Blocked periods")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="blocked_date_valid_range",
            ),
        ]
        indexes = [
            models.Index(fields=["accommodation", "start_date", "end_date"], name="blocked_date_range_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.accommodation_id}: {self.start_date} - {self.end_date}"
