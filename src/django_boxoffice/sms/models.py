"""SMS template and delivery log models for django-boxoffice."""

from django.core.exceptions import ValidationError
from django.db import models

from django_boxoffice.sms.templating import extract_variables, validate_template_content


class SMSTemplate(models.Model):
    """A reusable SMS body with ``{{variable}}`` placeholders.

    Notification code picks the most recently updated active template of a
    category and falls back to a built-in default when there is none.
    """

    class Category(models.TextChoices):
        """What the template is sent for."""

        PURCHASE = "purchase", "Purchase"
        VERIFICATION = "verification", "Payment verification"
        REMINDER = "reminder", "Reminder"
        GENERAL = "general", "General"

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")
    content = models.TextField()
    variables = models.JSONField(default=list, blank=True, help_text="Filled in from the content on save.")
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.GENERAL)
    language = models.CharField(max_length=10, default="en")
    is_active = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category", "name"]
        verbose_name = "SMS template"

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        """Reject empty, oversized or malformed template content."""
        errors = validate_template_content(self.content)
        if errors:
            raise ValidationError({"content": errors})

    def save(self, *args: object, **kwargs: object) -> None:
        """Refresh ``variables`` from the content before saving."""
        self.variables = extract_variables(self.content)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "content" in update_fields:
            kwargs["update_fields"] = {*update_fields, "variables"}
        super().save(*args, **kwargs)


class SMSLog(models.Model):
    """One attempt to deliver an SMS, successful or not."""

    class Status(models.TextChoices):
        """Delivery outcome reported by the provider."""

        SENT = "sent", "Sent"
        FAILED = "failed", "Failed"

    class MessageType(models.TextChoices):
        """Why the message was sent."""

        BOOKING = "booking", "Booking"
        CONFIRMATION = "confirmation", "Confirmation"
        OTHER = "other", "Other"

    phone_number = models.CharField(max_length=32)
    message = models.TextField()
    message_type = models.CharField(max_length=20, choices=MessageType.choices, default=MessageType.OTHER)
    status = models.CharField(max_length=20, choices=Status.choices)
    ticket = models.ForeignKey(
        "boxoffice_booking.Ticket",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sms_logs",
    )
    provider_message_id = models.CharField(max_length=100, blank=True, default="")
    error = models.TextField(blank=True, default="")
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "SMS log"

    def __str__(self) -> str:
        return f"{self.get_message_type_display()} to {self.phone_number} ({self.status})"
