"""Django admin configuration for the events app."""

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from django_boxoffice.booking.services.lifecycle import TicketLifecycleService
from django_boxoffice.events.models import EventDay, EventSession, TicketPrice

_BOOKED_FIELDS = ("adult_booked", "student_booked", "child_booked", "is_sold_out")


class EventSessionInline(admin.TabularInline):
    """Inline editor for the sessions of an event day.

    Booked counters are shown read-only; they belong to the capacity ledger.
    """

    model = EventSession
    extra = 0
    fields = (
        "name",
        "start_time",
        "end_time",
        "is_active",
        "adult_capacity",
        "student_capacity",
        "child_capacity",
        *_BOOKED_FIELDS,
    )
    readonly_fields = _BOOKED_FIELDS


@admin.register(EventDay)
class EventDayAdmin(admin.ModelAdmin):
    """Admin interface for event days with inline sessions."""

    list_display = ("name", "date", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = (EventSessionInline,)


@admin.register(EventSession)
class EventSessionAdmin(admin.ModelAdmin):
    """Admin interface for event sessions.

    Capacity ceilings are editable. The booked counters are maintained by
    the booking services; if they ever drift from the ticket rows, use the
    "Recalculate booked counters" action to rebuild them.
    """

    list_display = (
        "name",
        "day",
        "start_time",
        "end_time",
        "is_active",
        "adult_capacity",
        "adult_booked",
        "student_capacity",
        "student_booked",
        "child_capacity",
        "child_booked",
        "is_sold_out",
    )
    list_filter = ("day", "is_active", "is_sold_out")
    search_fields = ("name", "day__name")
    readonly_fields = _BOOKED_FIELDS
    list_select_related = ("day",)
    actions = ("recalculate_counts",)

    @admin.action(description="Recalculate booked counters")
    def recalculate_counts(self, request: HttpRequest, queryset: QuerySet[EventSession]) -> None:
        """Rebuild the booked counters of the selected sessions from their tickets."""
        count = TicketLifecycleService.recalculate_session_counts(queryset.values_list("pk", flat=True))
        self.message_user(request, f"Recalculated {count} session(s).", level=messages.SUCCESS)


@admin.register(TicketPrice)
class TicketPriceAdmin(admin.ModelAdmin):
    """Admin interface for ticket category prices."""

    list_display = ("name", "category", "price", "is_active")
    list_filter = ("is_active",)
