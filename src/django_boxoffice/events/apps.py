"""Django app configuration for the events app."""

from django.apps import AppConfig


class BoxOfficeEventsConfig(AppConfig):
    """Configuration for the events app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_boxoffice.events"
    label = "boxoffice_events"
    verbose_name = "Events"
