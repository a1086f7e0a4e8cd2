"""Booking SMS notifications.

Receivers for the booking signals schedule an SMS with
``transaction.on_commit``, so a message only goes out for a booking that is
actually durable and a delivery problem can never roll one back. Every
attempt is recorded in :class:`~django_boxoffice.sms.models.SMSLog`.
"""

import logging
from collections.abc import Callable, Mapping

from django.db import transaction
from django.dispatch import receiver

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.signals import ticket_confirmed, tickets_booked
from django_boxoffice.events.models import EventSession
from django_boxoffice.settings import get_config
from django_boxoffice.sms.client import SMSClient
from django_boxoffice.sms.models import SMSLog, SMSTemplate
from django_boxoffice.sms.templating import render_template

logger = logging.getLogger(__name__)

DEFAULT_BOOKING_TEMPLATE = (
    "Hello {{fullName}}! Your booking {{reference}} for {{eventDay}} - {{sessionName}} "
    "has been received.\n"
    "Tickets: {{ticketSummary}}\n"
    "Ticket codes: {{ticketCodes}}\n"
    "Total: {{currency}} {{totalAmount}}\n"
    "Please complete payment before {{holdExpiresAt}}."
)

DEFAULT_CONFIRMATION_TEMPLATE = (
    "Hello {{fullName}}! Your payment for ticket {{ticketCode}} has been confirmed.\n"
    "Event: {{eventDay}} - {{sessionName}}\n"
    "Date: {{eventDate}} at {{sessionTime}}\n"
    "Please keep this SMS as proof of purchase."
)


def _template_content(category: str, default: str) -> str:
    template = (
        SMSTemplate.objects.filter(category=category, is_active=True).order_by("-updated_at", "-pk").first()
    )
    return template.content if template else default


def _session_context(session: EventSession) -> dict[str, object]:
    return {
        "eventDay": session.day.name,
        "eventDate": session.day.date.isoformat(),
        "sessionName": session.name,
        "sessionTime": session.start_time.strftime("%H:%M"),
    }


def booking_context(reference: str, tickets: list[Ticket], session: EventSession) -> dict[str, object]:
    """Build template variables for a booking confirmation message."""
    first = tickets[0]
    hold = first.hold_expires_at
    return {
        "fullName": first.purchaser_name,
        "reference": reference,
        "ticketCodes": ", ".join(ticket.code for ticket in tickets),
        "ticketSummary": ", ".join(f"{ticket.quantity} {ticket.get_category_display()}" for ticket in tickets),
        "quantity": sum(ticket.quantity for ticket in tickets),
        "totalAmount": sum(ticket.total_amount for ticket in tickets),
        "currency": get_config().currency,
        "holdExpiresAt": hold.strftime("%Y-%m-%d %H:%M") if hold else "",
        "studentId": first.student_id or "",
        "institution": first.institution,
        **_session_context(session),
    }


def confirmation_context(ticket: Ticket) -> dict[str, object]:
    """Build template variables for a payment confirmation message."""
    return {
        "fullName": ticket.purchaser_name,
        "ticketCode": ticket.code,
        "reference": ticket.reference,
        "quantity": ticket.quantity,
        "totalAmount": ticket.total_amount,
        "currency": get_config().currency,
        **_session_context(ticket.session),
    }


def send_notification(
    *,
    phone: str,
    content: str,
    context: Mapping[str, object],
    message_type: str,
    ticket: Ticket | None = None,
    client: SMSClient | None = None,
) -> SMSLog | None:
    """Render and send one SMS, recording the attempt.

    Never raises: unexpected failures are logged with their traceback.

    Returns:
        The log entry, or ``None`` if even logging the attempt failed.
    """
    message = render_template(content, context)
    try:
        result = (client or SMSClient()).send(phone, message)
        return SMSLog.objects.create(
            phone_number=result.recipient,
            message=message,
            message_type=message_type,
            status=SMSLog.Status.SENT if result.success else SMSLog.Status.FAILED,
            ticket=ticket,
            provider_message_id=result.provider_message_id,
            error=result.error,
            metadata={"reference": ticket.reference} if ticket else {},
        )
    except Exception:
        logger.exception("Failed to send %s SMS for ticket %s", message_type, ticket.code if ticket else None)
        return None


def notify_booking(reference: str, ticket_ids: list[int]) -> None:
    """Send the booking SMS for a committed reservation."""
    tickets = list(Ticket.objects.filter(pk__in=ticket_ids).select_related("session__day").order_by("pk"))
    if not tickets:
        logger.warning("No tickets found for booking %s; skipping SMS", reference)
        return
    first = tickets[0]
    send_notification(
        phone=first.purchaser_phone,
        content=_template_content(SMSTemplate.Category.PURCHASE, DEFAULT_BOOKING_TEMPLATE),
        context=booking_context(reference, tickets, first.session),
        message_type=SMSLog.MessageType.BOOKING,
        ticket=first,
    )


def notify_confirmation(ticket_id: int) -> None:
    """Send the payment confirmation SMS for a ticket."""
    ticket = Ticket.objects.select_related("session__day").filter(pk=ticket_id).first()
    if ticket is None:
        logger.warning("Ticket %s no longer exists; skipping confirmation SMS", ticket_id)
        return
    send_notification(
        phone=ticket.purchaser_phone,
        content=_template_content(SMSTemplate.Category.VERIFICATION, DEFAULT_CONFIRMATION_TEMPLATE),
        context=confirmation_context(ticket),
        message_type=SMSLog.MessageType.CONFIRMATION,
        ticket=ticket,
    )


def _run_safely(callback_name: str, func: Callable[..., None], *args: object) -> None:
    try:
        func(*args)
    except Exception:
        logger.exception("SMS notification %s failed", callback_name)


@receiver(tickets_booked)
def on_tickets_booked(
    sender: type[Ticket],  # noqa: ARG001
    reference: str,
    tickets: list[Ticket],
    **kwargs: object,  # noqa: ARG001
) -> None:
    """Schedule the booking SMS once the booking transaction commits."""
    ticket_ids = [ticket.pk for ticket in tickets]
    transaction.on_commit(lambda: _run_safely("booking", notify_booking, reference, ticket_ids))


@receiver(ticket_confirmed)
def on_ticket_confirmed(
    sender: type[Ticket],  # noqa: ARG001
    ticket: Ticket,
    **kwargs: object,  # noqa: ARG001
) -> None:
    """Schedule the confirmation SMS once the confirmation commits."""
    ticket_id = ticket.pk
    transaction.on_commit(lambda: _run_safely("confirmation", notify_confirmation, ticket_id))
