"""Booking domain models."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.financials import derive_net_values


def _money(**kwargs):
    return models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, **kwargs)


class Booking(models.Model):
    """A guest's stay in an accommodation, with its financial breakdown."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    accommodation = models.ForeignKey(
        "accommodations.Accommodation",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    check_in = models.DateField()
    check_out = models.DateField(help_text=_("Departure day; the night before is the last one booked."))
    guests = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    nationality = models.CharField(max_length=50, blank=True, default="")
    primary_name = models.CharField(max_length=255)
    additional_names = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )

    gross_value = _money(help_text=_("Amount charged to the guest."))
    municipal_tax = _money()
    commission = _money(help_text=_("Platform commission."))
    bank_fee = _money()
    vat = _money()
    platform = models.CharField(max_length=50, blank=True, default="")
    value_net_of_commissions = _money(editable=False)
    value_net_of_vat = _money(editable=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-check_in", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["accommodation", "check_in", "check_out"], name="booking_stay_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} {self.primary_name} ({self.check_in} - {self.check_out})"

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def refresh_net_values(self) -> None:
        """Recompute both derived values from the stored inputs."""

        net = derive_net_values(self.gross_value, self.commission, self.bank_fee, self.vat)
        self.value_net_of_commissions = net.net_of_commissions
        self.value_net_of_vat = net.net_of_vat
