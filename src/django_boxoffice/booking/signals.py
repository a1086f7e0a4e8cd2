"""Custom signals for the booking app.

Signals:
    tickets_booked: Sent inside the booking transaction after tickets are
        written. Receivers that talk to the outside world must defer their
        work with ``transaction.on_commit``.
        Sender: The ``Ticket`` class.
        Kwargs:
            reference: The booking reference shared by the new tickets.
            tickets: List of the ``Ticket`` instances created.
            session: The ``EventSession`` booked.
    ticket_confirmed: Sent when a ticket transitions from PENDING to ACTIVE.
        Sender: The ``Ticket`` class.
        Kwargs:
            ticket: The confirmed ``Ticket``.
    ticket_cancelled: Sent when a ticket transitions to CANCELLED.
        Sender: The ``Ticket`` class.
        Kwargs:
            ticket: The cancelled ``Ticket``.
            expired: ``True`` when the cancellation came from hold expiry.
"""

from django.dispatch import Signal

tickets_booked = Signal()
ticket_confirmed = Signal()
ticket_cancelled = Signal()
