"""Event day, session, and ticket price models for django-boxoffice."""

from django.db import models


class Category(models.TextChoices):
    """Ticket class with an independent capacity ceiling per session."""

    ADULT = "adult", "Adult"
    STUDENT = "student", "Student"
    CHILD = "child", "Child"


class EventDay(models.Model):
    """A calendar day of the event (e.g. "Opening Day").

    Days group sessions. Deactivating a day closes every session on it for
    booking without touching the sessions themselves.
    """

    name = models.CharField(max_length=100)
    date = models.DateField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.date.isoformat()})"


class EventSession(models.Model):
    """A scheduled timeslot on an event day with per-category capacity.

    The ``*_capacity`` columns are the configured ceilings. The ``*_booked``
    columns are the committed counts and are only ever changed through
    conditional ``UPDATE`` statements in
    :mod:`django_boxoffice.booking.services.ledger`, which is what keeps
    ``booked <= capacity`` true under concurrent purchases.
    """

    day = models.ForeignKey(
        EventDay,
        on_delete=models.CASCADE,
        related_name="sessions",
    )
    name = models.CharField(max_length=100)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_active = models.BooleanField(
        default=True,
        help_text="Inactive sessions are closed for booking.",
    )

    adult_capacity = models.PositiveIntegerField(default=0)
    student_capacity = models.PositiveIntegerField(default=0)
    child_capacity = models.PositiveIntegerField(default=0)

    adult_booked = models.IntegerField(default=0)
    student_booked = models.IntegerField(default=0)
    child_booked = models.IntegerField(default=0)
    is_sold_out = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["day__date", "start_time", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.day.name})"

    @property
    def is_open(self) -> bool:
        """Return whether the session currently accepts bookings.

        A session is open when both the session and its day are active.
        Being sold out does not close a session; it is reported through
        per-category capacity instead.
        """
        return self.is_active and self.day.is_active

    def capacity_for(self, category: str) -> int:
        """Return the configured ceiling for *category*."""
        return getattr(self, f"{Category(category).value}_capacity")

    def booked_for(self, category: str) -> int:
        """Return the committed ledger count for *category*."""
        return getattr(self, f"{Category(category).value}_booked")


class TicketPrice(models.Model):
    """The unit price charged for a ticket category."""

    category = models.CharField(max_length=20, choices=Category.choices, unique=True)
    name = models.CharField(max_length=50)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.CharField(max_length=255, blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["category"]

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"
