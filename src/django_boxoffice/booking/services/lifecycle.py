"""Ticket lifecycle transitions and ledger maintenance.

Handles payment confirmation, cancellation, expiry of unpaid holds, and
rebuilding the ledger counters from ticket rows. Every transition that frees
seats gives them back to the ledger in the same transaction.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services import ledger
from django_boxoffice.booking.services.availability import get_sold_counts
from django_boxoffice.booking.services.ledger import CategoryCounts
from django_boxoffice.booking.signals import ticket_cancelled, ticket_confirmed
from django_boxoffice.events.models import EventSession

logger = logging.getLogger(__name__)


def _seats(ticket: Ticket) -> CategoryCounts:
    return CategoryCounts.from_mapping({ticket.category: ticket.quantity})


def _cancel_locked(ticket: Ticket, *, expired: bool) -> None:
    """Cancel a ticket already locked for update and release its seats."""
    ticket.status = Ticket.Status.CANCELLED
    ticket.hold_expires_at = None
    ticket.save(update_fields=["status", "hold_expires_at", "updated_at"])
    ledger.release_capacity(ticket.session_id, _seats(ticket))
    ticket_cancelled.send(sender=Ticket, ticket=ticket, expired=expired)


class TicketLifecycleService:
    """Stateless service for ticket status transitions."""

    @staticmethod
    @transaction.atomic
    def confirm_ticket(ticket: Ticket) -> Ticket:
        """Mark a pending ticket as paid.

        Args:
            ticket: The ticket to confirm.

        Returns:
            The updated ticket with ACTIVE status.

        Raises:
            ValidationError: If the ticket is not PENDING.
        """
        ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
        if not ticket.can_transition_to(Ticket.Status.ACTIVE):
            raise ValidationError(
                f"Only pending tickets can be confirmed. This ticket is '{ticket.get_status_display()}'."
            )

        ticket.status = Ticket.Status.ACTIVE
        ticket.hold_expires_at = None
        ticket.save(update_fields=["status", "hold_expires_at", "updated_at"])
        ticket_confirmed.send(sender=Ticket, ticket=ticket)

        logger.info("Confirmed ticket %s (reference %s)", ticket.code, ticket.reference)
        return ticket

    @staticmethod
    @transaction.atomic
    def cancel_ticket(ticket: Ticket) -> Ticket:
        """Cancel a pending or active ticket and release its seats.

        Args:
            ticket: The ticket to cancel.

        Returns:
            The updated ticket with CANCELLED status.

        Raises:
            ValidationError: If the ticket is already cancelled.
        """
        ticket = Ticket.objects.select_for_update().get(pk=ticket.pk)
        if not ticket.can_transition_to(Ticket.Status.CANCELLED):
            raise ValidationError(
                f"This ticket cannot be cancelled. It is '{ticket.get_status_display()}'."
            )

        _cancel_locked(ticket, expired=False)

        logger.info("Cancelled ticket %s (reference %s)", ticket.code, ticket.reference)
        return ticket

    @staticmethod
    @transaction.atomic
    def expire_pending_tickets(*, session_id: int | None = None, now: datetime | None = None) -> int:
        """Cancel pending tickets whose hold has lapsed and release their seats.

        Args:
            session_id: Restrict expiry to one session. ``None`` means all.
            now: Reference time, defaulting to ``timezone.now()``.

        Returns:
            The number of tickets expired.
        """
        if session_id is not None and not ledger.is_valid_primary_key(session_id):
            return 0
        now = now or timezone.now()
        stale = Ticket.objects.select_for_update().filter(
            status=Ticket.Status.PENDING,
            hold_expires_at__isnull=False,
            hold_expires_at__lte=now,
        )
        if session_id is not None:
            stale = stale.filter(session_id=session_id)

        count = 0
        for ticket in stale:
            _cancel_locked(ticket, expired=True)
            count += 1

        if count:
            logger.info("Expired %d pending ticket(s)", count)
        return count

    @staticmethod
    @transaction.atomic
    def recalculate_session_counts(session_ids: Iterable[int] | None = None) -> int:
        """Rebuild ledger counters and the sold-out flag from ticket rows.

        Used after manual data fixes, when the counters may have drifted from
        the tickets they summarize.

        Args:
            session_ids: Sessions to rebuild. ``None`` means every session.

        Returns:
            The number of sessions updated.
        """
        sessions = EventSession.objects.select_for_update().order_by("pk")
        if session_ids is not None:
            sessions = sessions.filter(pk__in=list(session_ids))
        sessions = list(sessions)
        sold = get_sold_counts(session.pk for session in sessions)

        for session in sessions:
            counts = sold.get(session.pk, CategoryCounts())
            session.adult_booked = counts.adult
            session.student_booked = counts.student
            session.child_booked = counts.child
            session.is_sold_out = all(
                session.booked_for(category) >= session.capacity_for(category) for category, _ in counts.items()
            )
            session.save(
                update_fields=["adult_booked", "student_booked", "child_booked", "is_sold_out", "updated_at"]
            )
            if any(session.booked_for(category) > session.capacity_for(category) for category, _ in counts.items()):
                logger.warning("Session %s is oversold: %s", session.pk, counts.as_dict())

        logger.info("Recalculated ledger counters for %d session(s)", len(sessions))
        return len(sessions)
