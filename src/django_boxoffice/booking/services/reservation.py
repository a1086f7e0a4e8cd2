"""Reservation validation and the atomic validate+commit cycle.

``validate`` decides whether a request fits the session's current
availability. ``ReservationService.book`` runs validation and the booking
writer inside one transaction holding the session's row lock, and retries the
whole cycle when the ledger's conditional write reports a conflict.

Results are plain values (:class:`Accept`, :class:`Reject`,
:class:`BookingResult`), never exceptions, so callers can hand them straight
to the client.
"""

import enum
import logging
from dataclasses import dataclass, field

from django.db import transaction

from django_boxoffice.booking.exceptions import BookingConflict, SessionNotFound
from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services import ledger
from django_boxoffice.booking.services.availability import AvailabilitySnapshot, get_session_availability
from django_boxoffice.booking.services.ledger import CategoryCounts
from django_boxoffice.booking.services.lifecycle import TicketLifecycleService
from django_boxoffice.booking.services.writer import BookingWriter, PurchaserInfo
from django_boxoffice.events.models import Category, EventSession
from django_boxoffice.settings import get_config

logger = logging.getLogger(__name__)


class RejectionReason(enum.StrEnum):
    """Why a booking request was not accepted."""

    INSUFFICIENT_ADULT_CAPACITY = "InsufficientAdultCapacity"
    INSUFFICIENT_STUDENT_CAPACITY = "InsufficientStudentCapacity"
    INSUFFICIENT_CHILD_CAPACITY = "InsufficientChildCapacity"
    SESSION_NOT_FOUND = "SessionNotFound"
    SESSION_CLOSED = "SessionClosed"
    EMPTY_REQUEST = "EmptyRequest"
    INVALID_QUANTITY = "InvalidQuantity"
    INVALID_REQUEST = "InvalidRequest"
    UNAVAILABLE = "Unavailable"


CAPACITY_REASONS: dict[Category, RejectionReason] = {
    Category.ADULT: RejectionReason.INSUFFICIENT_ADULT_CAPACITY,
    Category.STUDENT: RejectionReason.INSUFFICIENT_STUDENT_CAPACITY,
    Category.CHILD: RejectionReason.INSUFFICIENT_CHILD_CAPACITY,
}

_REASON_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.SESSION_NOT_FOUND: "The selected session does not exist.",
    RejectionReason.SESSION_CLOSED: "This session is not available for booking.",
    RejectionReason.EMPTY_REQUEST: "Select at least one ticket.",
    RejectionReason.INVALID_QUANTITY: "Ticket quantities cannot be negative.",
    RejectionReason.INVALID_REQUEST: "The booking request is malformed.",
    RejectionReason.UNAVAILABLE: "Tickets could not be reserved right now. Please try again.",
}


@dataclass(frozen=True, slots=True)
class BookingRequest:
    """Seats requested for one session."""

    session_id: int
    adult: int = 0
    student: int = 0
    child: int = 0

    @property
    def quantities(self) -> CategoryCounts:
        """Return the requested quantities as :class:`CategoryCounts`."""
        return CategoryCounts(adult=self.adult, student=self.student, child=self.child)


@dataclass(frozen=True, slots=True)
class Accept:
    """The request fits the session's current availability."""

    availability: AvailabilitySnapshot
    session: EventSession | None = field(default=None, repr=False, compare=False)


@dataclass(frozen=True, slots=True)
class Reject:
    """The request cannot be booked.

    Attributes:
        reasons: Every applicable reason. Capacity shortfalls are reported for
            each failing category so the client can adjust all of them.
        availability: The snapshot the decision was based on, when the
            session exists.
    """

    reasons: tuple[RejectionReason, ...]
    availability: AvailabilitySnapshot | None = None

    @property
    def message(self) -> str:
        """Return a human-readable explanation of the first reason."""
        reason = self.reasons[0]
        for category, capacity_reason in CAPACITY_REASONS.items():
            if reason == capacity_reason:
                remaining = self.availability.remaining.get(category) if self.availability else 0
                return f"Only {max(remaining, 0)} {category.label.lower()} tickets available."
        return _REASON_MESSAGES[reason]


@dataclass(frozen=True, slots=True)
class BookingResult:
    """A committed booking."""

    reference: str
    tickets: tuple[Ticket, ...]


def _quantity_reasons(requested: CategoryCounts) -> tuple[RejectionReason, ...]:
    if any(quantity < 0 for _, quantity in requested.items()):
        return (RejectionReason.INVALID_QUANTITY,)
    if requested.total == 0:
        return (RejectionReason.EMPTY_REQUEST,)
    return ()


def validate(session_id: int, requested: CategoryCounts, *, lock: bool = False) -> Accept | Reject:
    """Decide whether *requested* seats can be booked on a session.

    Quantity checks come first, so an all-zero request is an
    ``EmptyRequest`` whatever the state of the session. Then the session must
    exist and be open, and every requested category must fit in its
    remaining capacity.

    Args:
        session_id: The session to book.
        requested: Seats requested per category.
        lock: Take the session's row lock before reading availability. Only
            valid inside ``transaction.atomic``; the booking cycle always
            passes ``True`` so that the decision stays true until commit.

    Returns:
        :class:`Accept` or :class:`Reject`.
    """
    reasons = _quantity_reasons(requested)
    if reasons:
        return Reject(reasons=reasons)
    if not ledger.is_valid_primary_key(session_id):
        return Reject(reasons=(RejectionReason.SESSION_NOT_FOUND,))

    try:
        if lock:
            session = ledger.lock_session(session_id)
        else:
            session = EventSession.objects.select_related("day").get(pk=session_id)
    except (SessionNotFound, EventSession.DoesNotExist):
        return Reject(reasons=(RejectionReason.SESSION_NOT_FOUND,))

    snapshot = get_session_availability(session.pk)
    if not session.is_open:
        return Reject(reasons=(RejectionReason.SESSION_CLOSED,), availability=snapshot)

    shortfalls = tuple(
        CAPACITY_REASONS[category]
        for category, quantity in requested.items()
        if quantity > 0 and quantity > snapshot.remaining.get(category)
    )
    if shortfalls:
        return Reject(reasons=shortfalls, availability=snapshot)
    return Accept(availability=snapshot, session=session)


class ReservationService:
    """Stateless service running the validate+commit booking cycle."""

    @staticmethod
    def book(request: BookingRequest, purchaser: PurchaserInfo) -> BookingResult | Reject:
        """Validate and commit a booking atomically.

        Each attempt opens a transaction, releases lapsed pending holds on the
        session, locks the session row, validates, and hands accepted requests
        to :class:`BookingWriter`. When the writer's conditional capacity write
        loses to a concurrent booking, the attempt is rolled back and the
        whole cycle re-runs, up to ``BOXOFFICE["commit_retries"]`` times.

        Args:
            request: The session and seats requested.
            purchaser: Contact details for the tickets.

        Returns:
            A :class:`BookingResult` on success, otherwise a :class:`Reject`.
            Exhausted retries produce ``Reject`` with ``Unavailable``.
        """
        quantities = request.quantities
        early = _quantity_reasons(quantities)
        if early:
            return Reject(reasons=early)
        if not ledger.is_valid_primary_key(request.session_id):
            return Reject(reasons=(RejectionReason.SESSION_NOT_FOUND,))

        attempts = get_config().commit_retries
        for attempt in range(1, attempts + 1):
            try:
                with transaction.atomic():
                    TicketLifecycleService.expire_pending_tickets(session_id=request.session_id)
                    decision = validate(request.session_id, quantities, lock=True)
                    if isinstance(decision, Reject):
                        return decision
                    tickets = BookingWriter.commit(decision.session, quantities, purchaser)
            except BookingConflict:
                logger.warning(
                    "Booking conflict on session %s (attempt %d of %d)",
                    request.session_id,
                    attempt,
                    attempts,
                )
                continue

            reference = tickets[0].reference
            logger.info(
                "Booked %s on session %s (reference %s)",
                quantities.as_dict(),
                request.session_id,
                reference,
            )
            return BookingResult(reference=reference, tickets=tuple(tickets))

        logger.warning("Giving up on session %s after %d booking conflicts", request.session_id, attempts)
        return Reject(
            reasons=(RejectionReason.UNAVAILABLE,),
            availability=get_session_availability(request.session_id),
        )
