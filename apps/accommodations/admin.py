"""Admin registrations for the accommodations domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Accommodation, AccommodationImage, BlockedDate


class AccommodationImageInline(admin.TabularInline):
    model = AccommodationImage
    extra = 0
    fields = ("image_url", "caption", "display_order", "is_primary")


class BlockedDateInline(admin.TabularInline):
    model = BlockedDate
    extra = 0
    fields = ("start_date", "end_date", "reason")


@admin.register(Accommodation)
class AccommodationAdmin(admin.ModelAdmin):
    list_display = ("name", "max_guests", "updated_at")
    search_fields = ("name",)
    inlines = [AccommodationImageInline, BlockedDateInline]


@admin.register(BlockedDate)
class BlockedDateAdmin(admin.ModelAdmin):
    list_display = ("accommodation", "start_date", "end_date", "reason", "created_at")
    list_filter = ("accommodation",)
    date_hierarchy = "start_date"
