"""Management command to bootstrap an event schedule from a TOML configuration file."""

from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser
from django.db import transaction

from django_boxoffice.config_loader import CATEGORIES, load_schedule_config
from django_boxoffice.events.models import EventDay, EventSession, TicketPrice


def _session_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Map a TOML session table to ``EventSession`` field values."""
    fields: dict[str, Any] = {
        "start_time": data["start"],
        "end_time": data["end"],
        "is_active": data["active"],
    }
    for category in CATEGORIES:
        fields[f"{category}_capacity"] = data["capacity"][category]
    return fields


class Command(BaseCommand):
    """Bootstrap event days, sessions and ticket prices from a TOML file.

    Days are matched by name and date, sessions by day and name, and prices
    by category. Without ``--update`` an existing record is left untouched
    and reported; with it, the record is updated in place. Booked counters
    are never written here, so re-running against a live schedule only
    changes the configured ceilings.

    Usage::

        manage.py bootstrap_schedule --config schedule.toml
        manage.py bootstrap_schedule --config schedule.toml --update
        manage.py bootstrap_schedule --config schedule.toml --dry-run
    """

    help = "Create or update event days, sessions and ticket prices from a TOML config file."

    def add_arguments(self, parser: CommandParser) -> None:
        """Define the command-line arguments accepted by this command.

        Args:
            parser: The argument parser to configure.
        """
        parser.add_argument(
            "--config",
            required=True,
            help="Path to the schedule TOML configuration file.",
        )
        parser.add_argument(
            "--update",
            action="store_true",
            default=False,
            help="Update existing days, sessions and prices instead of skipping them.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            default=False,
            help="Validate the config and print what would be created without saving.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the bootstrap command.

        Args:
            *args: Positional arguments (unused).
            **options: Parsed command-line options.
        """
        update: bool = options["update"]

        try:
            schedule = load_schedule_config(options["config"])
        except (FileNotFoundError, TypeError, ValueError) as exc:
            raise CommandError(str(exc)) from exc

        if options["dry_run"]:
            self._print_dry_run(schedule)
            return

        with transaction.atomic():
            created = updated = 0
            for day_data in schedule["days"]:
                day, day_created, day_updated = self._bootstrap_day(day_data, update=update)
                created += day_created
                updated += day_updated
                for session_data in day_data["sessions"]:
                    session_created, session_updated = self._bootstrap_session(day, session_data, update=update)
                    created += session_created
                    updated += session_updated
            for price_data in schedule["prices"]:
                price_created, price_updated = self._bootstrap_price(price_data, update=update)
                created += price_created
                updated += price_updated

        self.stdout.write(self.style.SUCCESS(f"Schedule bootstrapped: {created} created, {updated} updated."))

    def _bootstrap_day(self, data: dict[str, Any], *, update: bool) -> tuple[EventDay, int, int]:
        existing = EventDay.objects.filter(name=data["name"], date=data["date"]).first()
        if existing and update:
            existing.is_active = data["active"]
            existing.save()
            self.stdout.write(self.style.SUCCESS(f"  Updated day: {existing}"))
            return existing, 0, 1
        if existing:
            self.stdout.write(self.style.WARNING(f"  Day '{existing}' already exists, skipping."))
            return existing, 0, 0

        day = EventDay.objects.create(name=data["name"], date=data["date"], is_active=data["active"])
        self.stdout.write(self.style.SUCCESS(f"  Created day: {day}"))
        return day, 1, 0

    def _bootstrap_session(self, day: EventDay, data: dict[str, Any], *, update: bool) -> tuple[int, int]:
        fields = _session_fields(data)
        existing = EventSession.objects.filter(day=day, name=data["name"]).first()
        if existing and update:
            for attr, value in fields.items():
                setattr(existing, attr, value)
            existing.save()
            self.stdout.write(self.style.SUCCESS(f"  Updated session: {existing}"))
            return 0, 1
        if existing:
            self.stdout.write(self.style.WARNING(f"  Session '{existing}' already exists, skipping."))
            return 0, 0

        session = EventSession.objects.create(day=day, name=data["name"], **fields)
        self.stdout.write(self.style.SUCCESS(f"  Created session: {session}"))
        return 1, 0

    def _bootstrap_price(self, data: dict[str, Any], *, update: bool) -> tuple[int, int]:
        fields = {
            "name": data["name"],
            "price": data["price"],
            "description": data["description"],
            "is_active": data.get("active", True),
        }
        existing = TicketPrice.objects.filter(category=data["category"]).first()
        if existing and update:
            for attr, value in fields.items():
                setattr(existing, attr, value)
            existing.save()
            self.stdout.write(self.style.SUCCESS(f"  Updated price: {existing}"))
            return 0, 1
        if existing:
            self.stdout.write(self.style.WARNING(f"  Price for '{data['category']}' already exists, skipping."))
            return 0, 0

        price = TicketPrice.objects.create(category=data["category"], **fields)
        self.stdout.write(self.style.SUCCESS(f"  Created price: {price}"))
        return 1, 0

    def _print_dry_run(self, schedule: dict[str, Any]) -> None:
        """Print a preview of what would be created without touching the database."""
        self.stdout.write(self.style.MIGRATE_HEADING("\n[DRY RUN] No database changes will be made.\n"))
        self.stdout.write(self.style.MIGRATE_HEADING(f"Days ({len(schedule['days'])}):"))
        for day in schedule["days"]:
            self.stdout.write(f"  {day['name']} ({day['date'].isoformat()})")
            for session in day["sessions"]:
                capacity = ", ".join(f"{category}={session['capacity'][category]}" for category in CATEGORIES)
                self.stdout.write(
                    f"    {session['name']} {session['start'].strftime('%H:%M')}"
                    f"-{session['end'].strftime('%H:%M')} [{capacity}]"
                )

        if schedule["prices"]:
            self.stdout.write(self.style.MIGRATE_HEADING(f"\nPrices ({len(schedule['prices'])}):"))
            for price in schedule["prices"]:
                self.stdout.write(f"  {price['category']}: {price['name']} {price['price']}")
