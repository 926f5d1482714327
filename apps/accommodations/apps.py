from django.apps import AppConfig


class AccommodationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.accommodations"
    label = "accommodations"
