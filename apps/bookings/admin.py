"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "accommodation",
        "primary_name",
        "status",
        "check_in",
        "check_out",
        "gross_value",
        "platform",
        "created_at",
    )
    list_filter = ("status", "accommodation", "platform", "check_in")
    search_fields = ("primary_name", "additional_names", "accommodation__name")
    readonly_fields = (
        "value_net_of_commissions",
        "value_net_of_vat",
        "created_at",
        "updated_at",
    )

    def save_model(self, request, obj, form, change):  # type: ignore
        obj.refresh_net_values()
        super().save_model(request, obj, form, change)
