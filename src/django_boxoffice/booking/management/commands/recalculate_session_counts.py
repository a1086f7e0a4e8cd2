"""Management command to rebuild session booked counters from ticket rows."""

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_boxoffice.booking.services.ledger import is_valid_primary_key
from django_boxoffice.booking.services.lifecycle import TicketLifecycleService
from django_boxoffice.events.models import EventSession


class Command(BaseCommand):
    """Recalculate ``*_booked`` counters and the sold-out flag.

    Usage::

        manage.py recalculate_session_counts
        manage.py recalculate_session_counts --session 3 --session 4
    """

    help = "Rebuild session booked counters and sold-out flags from non-cancelled tickets."

    def add_arguments(self, parser: CommandParser) -> None:
        """Define the command-line arguments accepted by this command."""
        parser.add_argument(
            "--session",
            type=int,
            action="append",
            dest="sessions",
            default=None,
            help="Session ID to recalculate. Repeat for several; omit for all sessions.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the recalculation."""
        session_ids: list[int] | None = options["sessions"]
        if session_ids:
            candidates = [pk for pk in session_ids if is_valid_primary_key(pk)]
            missing = set(session_ids) - set(
                EventSession.objects.filter(pk__in=candidates).values_list("pk", flat=True)
            )
            if missing:
                raise CommandError(f"Unknown session ID(s): {', '.join(str(pk) for pk in sorted(missing))}")

        count = TicketLifecycleService.recalculate_session_counts(session_ids)
        self.stdout.write(self.style.SUCCESS(f"Recalculated {count} session(s)."))
