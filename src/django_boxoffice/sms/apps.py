"""Django app configuration for the SMS app."""

from django.apps import AppConfig


class BoxOfficeSMSConfig(AppConfig):
    """Configuration for the SMS app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_boxoffice.sms"
    label = "boxoffice_sms"
    verbose_name = "SMS"

    def ready(self) -> None:
        """Connect booking notification receivers."""
        import django_boxoffice.sms.notifications  # noqa: F401, PLC0415
