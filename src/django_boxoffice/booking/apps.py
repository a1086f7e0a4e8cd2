"""Django app configuration for the booking app."""

from django.apps import AppConfig


class BoxOfficeBookingConfig(AppConfig):
    """Configuration for the booking app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "django_boxoffice.booking"
    label = "boxoffice_booking"
    verbose_name = "Booking"
