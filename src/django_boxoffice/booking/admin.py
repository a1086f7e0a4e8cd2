"""Django admin configuration for the booking app."""

from collections.abc import Callable

from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.db.models import QuerySet
from django.http import HttpRequest

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services.lifecycle import TicketLifecycleService


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    """Admin interface for tickets.

    Status, quantities and amounts are read-only: they change only through
    the lifecycle service, which keeps the session's booked counters in step.
    Use the confirm and cancel actions instead of editing rows. Tickets cannot
    be deleted here; cancelling is the only way to free their seats.
    """

    list_display = (
        "code",
        "reference",
        "session",
        "category",
        "quantity",
        "status",
        "total_amount",
        "hold_expires_at",
        "created_at",
    )
    list_filter = ("status", "category", "session__day")
    search_fields = ("code", "reference", "purchaser_name", "purchaser_email")
    readonly_fields = (
        "session",
        "reference",
        "code",
        "category",
        "quantity",
        "status",
        "unit_price",
        "total_amount",
        "hold_expires_at",
        "created_at",
        "updated_at",
    )
    list_select_related = ("session", "session__day")
    actions = ("confirm_tickets", "cancel_tickets")

    def has_add_permission(self, request: HttpRequest) -> bool:  # noqa: ARG002, D102
        return False

    def has_delete_permission(self, request: HttpRequest, obj: Ticket | None = None) -> bool:  # noqa: ARG002, D102
        return False

    @admin.action(description="Confirm selected pending tickets")
    def confirm_tickets(self, request: HttpRequest, queryset: QuerySet[Ticket]) -> None:
        """Mark selected tickets as paid, skipping those that are not pending."""
        self._apply(request, queryset, TicketLifecycleService.confirm_ticket, "confirmed")

    @admin.action(description="Cancel selected tickets")
    def cancel_tickets(self, request: HttpRequest, queryset: QuerySet[Ticket]) -> None:
        """Cancel selected tickets and release their seats."""
        self._apply(request, queryset, TicketLifecycleService.cancel_ticket, "cancelled")

    def _apply(
        self,
        request: HttpRequest,
        queryset: QuerySet[Ticket],
        transition: Callable[[Ticket], Ticket],
        verb: str,
    ) -> None:
        done = 0
        for ticket in queryset:
            try:
                transition(ticket)
            except ValidationError as exc:
                self.message_user(request, f"{ticket.code}: {exc.messages[0]}", level=messages.WARNING)
            else:
                done += 1
        if done:
            self.message_user(request, f"{done} ticket(s) {verb}.", level=messages.SUCCESS)
