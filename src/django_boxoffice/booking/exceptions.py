"""Exceptions raised inside the booking services.

These never cross the HTTP boundary: the reservation service turns them into
structured :class:`~django_boxoffice.booking.services.reservation.Reject`
results, and views turn anything else into a generic failure.
"""


class BookingError(Exception):
    """Base class for booking service errors."""


class SessionNotFound(BookingError):
    """Raised when a session id does not exist."""

    def __init__(self, session_id: object) -> None:
        super().__init__(f"Session {session_id} does not exist.")
        self.session_id = session_id


class BookingConflict(BookingError):
    """Raised when an atomic capacity write loses to a concurrent booking.

    The conditional ledger update matched no row, meaning the counters moved
    between validation and commit. The whole validate+commit cycle may be
    retried.
    """

    def __init__(self, session_id: object) -> None:
        super().__init__(f"Capacity for session {session_id} changed during commit.")
        self.session_id = session_id
