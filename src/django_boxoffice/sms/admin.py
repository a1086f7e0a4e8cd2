"""Django admin configuration for the SMS app."""

from django.contrib import admin
from django.http import HttpRequest

from django_boxoffice.sms.models import SMSLog, SMSTemplate
from django_boxoffice.sms.templating import calculate_sms_units


@admin.register(SMSTemplate)
class SMSTemplateAdmin(admin.ModelAdmin):
    """Admin interface for SMS templates.

    ``variables`` is derived from the content on save and shown read-only,
    together with the number of SMS units the raw template occupies.
    """

    list_display = ("name", "category", "language", "is_active", "sms_units", "updated_at")
    list_filter = ("category", "language", "is_active")
    search_fields = ("name", "description", "content")
    readonly_fields = ("variables", "sms_units", "created_at", "updated_at")

    @admin.display(description="SMS units")
    def sms_units(self, obj: SMSTemplate) -> int:
        """Return the unit count of the unrendered content."""
        return calculate_sms_units(obj.content or "")


@admin.register(SMSLog)
class SMSLogAdmin(admin.ModelAdmin):
    """Read-only admin for SMS delivery attempts."""

    list_display = ("phone_number", "message_type", "status", "ticket", "provider_message_id", "created_at")
    list_filter = ("status", "message_type")
    search_fields = ("phone_number", "provider_message_id", "ticket__code", "ticket__reference")
    readonly_fields = (
        "phone_number",
        "message",
        "message_type",
        "status",
        "ticket",
        "provider_message_id",
        "error",
        "metadata",
        "created_at",
    )

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_change_permission(self, request: HttpRequest, obj: SMSLog | None = None) -> bool:  # noqa: ARG002, D102
        return False
