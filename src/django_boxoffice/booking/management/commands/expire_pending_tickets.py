"""Management command to release capacity held by unpaid pending tickets."""

from typing import Any

from django.core.management.base import BaseCommand, CommandParser

from django_boxoffice.booking.services.lifecycle import TicketLifecycleService


class Command(BaseCommand):
    """Cancel pending tickets whose hold has lapsed.

    Bookings already reap stale holds on the session they touch; run this
    periodically (e.g. from cron) so that availability listings stay accurate
    for sessions nobody is booking.

    Usage::

        manage.py expire_pending_tickets
        manage.py expire_pending_tickets --session 12
    """

    help = "Cancel pending tickets whose hold has expired and release their seats."

    def add_arguments(self, parser: CommandParser) -> None:
        """Define the command-line arguments accepted by this command."""
        parser.add_argument(
            "--session",
            type=int,
            default=None,
            help="Only expire tickets of this session ID.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the expiry."""
        count = TicketLifecycleService.expire_pending_tickets(session_id=options["session"])
        self.stdout.write(self.style.SUCCESS(f"Expired {count} pending ticket(s)."))
