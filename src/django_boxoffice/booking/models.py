"""Ticket model for django-boxoffice."""

from django.db import models
from encrypted_fields import EncryptedCharField

from django_boxoffice.events.models import Category


class Ticket(models.Model):
    """A purchased bundle of one category for one session.

    A booking spanning several categories produces one ticket per non-zero
    category, all sharing the same ``reference``. Every non-cancelled ticket
    counts ``quantity`` seats against its session's capacity for its
    category.

    Status only moves forward: ``PENDING -> ACTIVE``, ``PENDING -> CANCELLED``
    and ``ACTIVE -> CANCELLED``.
    """

    class Status(models.TextChoices):
        """Lifecycle status of a ticket."""

        PENDING = "pending", "Pending"
        ACTIVE = "active", "Active"
        CANCELLED = "cancelled", "Cancelled"

    ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
        Status.PENDING: frozenset({Status.ACTIVE, Status.CANCELLED}),
        Status.ACTIVE: frozenset({Status.CANCELLED}),
        Status.CANCELLED: frozenset(),
    }

    session = models.ForeignKey(
        "boxoffice_events.EventSession",
        on_delete=models.PROTECT,
        related_name="tickets",
    )
    reference = models.CharField(max_length=32, db_index=True)
    code = models.CharField(max_length=32, unique=True)
    category = models.CharField(max_length=20, choices=Category.choices)
    quantity = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )

    purchaser_name = models.CharField(max_length=255)
    purchaser_phone = EncryptedCharField(max_length=32)
    purchaser_email = models.EmailField(blank=True, default="")
    student_id = EncryptedCharField(max_length=50, blank=True, null=True, default=None)
    institution = models.CharField(max_length=100, blank=True, default="")

    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    hold_expires_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Unpaid pending tickets are cancelled after this time.",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["session", "status"], name="ticket_session_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.get_category_display()} x{self.quantity})"

    def can_transition_to(self, status: str) -> bool:
        """Return whether moving from the current status to *status* is allowed."""
        return status in self.ALLOWED_TRANSITIONS.get(self.status, frozenset())
