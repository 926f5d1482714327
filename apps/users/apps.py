from django.apps import AppConfig


class UsersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.users"
    label = "users"

    def ready(self) -> None:
        # Connects the setting_changed receiver that rebuilds the resolver.
        from . import identity  # noqa: F401
