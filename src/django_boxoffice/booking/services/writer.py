"""Booking writer that persists accepted reservations as tickets.

Only ever invoked by the reservation service after validation accepted the
request, inside the same ``transaction.atomic`` block.
"""

import secrets
import string
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services import ledger
from django_boxoffice.booking.services.ledger import CategoryCounts
from django_boxoffice.booking.signals import tickets_booked
from django_boxoffice.events.models import EventSession, TicketPrice
from django_boxoffice.settings import get_config

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_CODE_ATTEMPTS = 10


@dataclass(frozen=True, slots=True)
class PurchaserInfo:
    """Contact details of the person buying tickets."""

    full_name: str
    phone: str
    email: str = ""
    student_id: str = ""
    institution: str = ""


def _random_code(length: int) -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def _generate_reference() -> str:
    """Generate a booking reference using the configured prefix.

    The prefix is set via ``BOXOFFICE["booking_reference_prefix"]``
    (default ``"BKG"``), producing references like ``BKG-A1B2C3D4``.
    """
    prefix = get_config().booking_reference_prefix
    for _ in range(_MAX_CODE_ATTEMPTS):
        reference = f"{prefix}-{_random_code(8)}"
        if not Ticket.objects.filter(reference=reference).exists():
            return reference
    msg = f"Could not generate a unique booking reference after {_MAX_CODE_ATTEMPTS} attempts"
    raise RuntimeError(msg)


def _unit_prices() -> dict[str, Decimal]:
    return dict(TicketPrice.objects.filter(is_active=True).values_list("category", "price"))


def _create_ticket(**fields: object) -> Ticket:
    """Create a ticket with a unique random code, retrying on collision.

    Each attempt runs in its own savepoint so a duplicate code does not
    poison the surrounding booking transaction.
    """
    length = get_config().ticket_code_length
    for _ in range(_MAX_CODE_ATTEMPTS):
        try:
            with transaction.atomic():
                return Ticket.objects.create(code=_random_code(length), **fields)
        except IntegrityError:
            continue
    msg = f"Could not generate a unique ticket code after {_MAX_CODE_ATTEMPTS} attempts"
    raise RuntimeError(msg)


class BookingWriter:
    """Stateless service that commits accepted reservations."""

    @staticmethod
    @transaction.atomic
    def commit(
        session: EventSession,
        quantities: CategoryCounts,
        purchaser: PurchaserInfo,
    ) -> list[Ticket]:
        """Write tickets for an accepted reservation.

        Claims the seats through the ledger's conditional increment first, so
        a booking that slipped in since validation makes this raise instead of
        overselling. Then creates one PENDING ticket per non-zero category,
        all sharing a booking reference, with a hold that expires after
        ``BOXOFFICE["pending_ticket_expiry_minutes"]``.

        The ``tickets_booked`` signal is sent before returning; notification
        receivers defer their side effects to ``transaction.on_commit`` so a
        failed notification can never undo the booking.

        Args:
            session: The (locked) session being booked.
            quantities: Seats requested per category.
            purchaser: Contact details stored on every ticket.

        Returns:
            The created tickets, in category order.

        Raises:
            BookingConflict: If the ledger rejected the capacity write.
        """
        ledger.reserve_capacity(session.pk, quantities)

        config = get_config()
        reference = _generate_reference()
        hold_expires_at = timezone.now() + timedelta(minutes=config.pending_ticket_expiry_minutes)
        prices = _unit_prices()

        tickets: list[Ticket] = []
        for category, quantity in quantities.items():
            if quantity <= 0:
                continue
            unit_price = prices.get(category.value, Decimal("0.00"))
            tickets.append(
                _create_ticket(
                    session=session,
                    reference=reference,
                    category=category.value,
                    quantity=quantity,
                    status=Ticket.Status.PENDING,
                    purchaser_name=purchaser.full_name,
                    purchaser_phone=purchaser.phone,
                    purchaser_email=purchaser.email,
                    student_id=purchaser.student_id or None,
                    institution=purchaser.institution,
                    unit_price=unit_price,
                    total_amount=unit_price * quantity,
                    hold_expires_at=hold_expires_at,
                )
            )

        tickets_booked.send(sender=Ticket, reference=reference, tickets=tickets, session=session)
        return tickets
