"""TOML loader for event schedule bootstrap configuration.

Loads and validates a schedule TOML file (see ``schedule.example.toml``) so
that event days, sessions with their per-category capacity, and ticket
prices can be created programmatically.

Example::

    [[schedule.prices]]
    category = "adult"
    name = "Adult"
    price = 15000.00

    [[schedule.days]]
    name = "Opening Day"
    date = 2026-12-01

    [[schedule.days.sessions]]
    name = "Morning"
    start = 09:00:00
    end = 12:00:00
    capacity = { adult = 100, student = 50, child = 30 }
"""

import tomllib
from datetime import date, time
from decimal import Decimal
from pathlib import Path
from typing import Any

CATEGORIES: tuple[str, ...] = ("adult", "student", "child")

_REQUIRED_DAY_FIELDS: set[str] = {"name", "date"}
_REQUIRED_SESSION_FIELDS: set[str] = {"name", "start", "end"}
_REQUIRED_PRICE_FIELDS: set[str] = {"category", "price"}


def load_schedule_config(path: str | Path) -> dict[str, Any]:
    """Load and validate a schedule TOML configuration file.

    Args:
        path: Filesystem path to the TOML file.

    Returns:
        The ``schedule`` mapping from the parsed TOML with native types
        (``datetime.date`` for dates, ``datetime.time`` for session times,
        ``Decimal`` for prices). Every session gets a complete ``capacity``
        mapping with a non-negative integer per category, and every day an
        ``active`` flag.

    Raises:
        FileNotFoundError: If *path* does not exist.
        TypeError: If a table has the wrong type.
        ValueError: If required keys or fields are missing or invalid, or the
            file is not valid TOML.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Schedule config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open("rb") as fh:
        try:
            data: dict[str, Any] = tomllib.load(fh, parse_float=Decimal)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {path}: {exc}"
            raise ValueError(msg) from exc

    if "schedule" not in data:
        msg = "Missing required [schedule] table in config file"
        raise ValueError(msg)

    schedule = data["schedule"]
    _validate_mapping(schedule, {"days"}, "schedule")

    days = _validate_list(schedule.get("days"), "schedule.days", _REQUIRED_DAY_FIELDS, must_exist=True)
    seen_days: set[tuple[str, date]] = set()
    for idx, day in enumerate(days):
        label = f"schedule.days[{idx}]"
        _validate_day(day, label)
        key = (day["name"], day["date"])
        if key in seen_days:
            msg = f"{label} duplicates day '{day['name']}' on {day['date'].isoformat()}"
            raise ValueError(msg)
        seen_days.add(key)

    prices = _validate_list(schedule.get("prices"), "schedule.prices", _REQUIRED_PRICE_FIELDS)
    schedule["prices"] = prices
    seen_categories: set[str] = set()
    for idx, price in enumerate(prices):
        _validate_price(price, f"schedule.prices[{idx}]")
        if price["category"] in seen_categories:
            msg = f"schedule.prices has a duplicate category: {price['category']}"
            raise ValueError(msg)
        seen_categories.add(price["category"])

    return schedule


def _validate_day(day: dict[str, Any], label: str) -> None:
    if not isinstance(day["name"], str) or not day["name"].strip():
        msg = f"{label}.name must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(day["date"], date) or hasattr(day["date"], "hour"):
        msg = f"{label}.date must be a TOML local date (e.g. 2026-12-01)"
        raise ValueError(msg)
    day.setdefault("active", True)
    if not isinstance(day["active"], bool):
        msg = f"{label}.active must be a boolean"
        raise ValueError(msg)

    sessions = _validate_list(day.get("sessions"), f"{label}.sessions", _REQUIRED_SESSION_FIELDS)
    day["sessions"] = sessions
    names: set[str] = set()
    for idx, session in enumerate(sessions):
        session_label = f"{label}.sessions[{idx}]"
        _validate_session(session, session_label)
        if session["name"] in names:
            msg = f"{label}.sessions has a duplicate name: {session['name']}"
            raise ValueError(msg)
        names.add(session["name"])


def _validate_session(session: dict[str, Any], label: str) -> None:
    if not isinstance(session["name"], str) or not session["name"].strip():
        msg = f"{label}.name must be a non-empty string"
        raise ValueError(msg)
    for key in ("start", "end"):
        if not isinstance(session[key], time):
            msg = f"{label}.{key} must be a TOML local time (e.g. 09:00:00)"
            raise ValueError(msg)
    if session["end"] <= session["start"]:
        msg = f"{label}.end must be after start"
        raise ValueError(msg)
    session.setdefault("active", True)
    if not isinstance(session["active"], bool):
        msg = f"{label}.active must be a boolean"
        raise ValueError(msg)

    capacity = session.get("capacity", {})
    _validate_mapping(capacity, set(), f"{label}.capacity")
    unknown = capacity.keys() - set(CATEGORIES)
    if unknown:
        msg = f"{label}.capacity has unknown categories: {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    for category in CATEGORIES:
        value = capacity.get(category, 0)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = f"{label}.capacity.{category} must be a non-negative integer"
            raise ValueError(msg)
    session["capacity"] = {category: capacity.get(category, 0) for category in CATEGORIES}


def _validate_price(price: dict[str, Any], label: str) -> None:
    if price["category"] not in CATEGORIES:
        msg = f"{label}.category must be one of: {', '.join(CATEGORIES)}"
        raise ValueError(msg)
    amount = price["price"]
    if isinstance(amount, bool) or not isinstance(amount, (int, Decimal)) or amount < 0:
        msg = f"{label}.price must be a non-negative number"
        raise ValueError(msg)
    price["price"] = Decimal(str(amount))
    price.setdefault("name", price["category"].title())
    price.setdefault("description", "")


def _validate_list(
    items: object,
    label: str,
    required_fields: set[str],
    *,
    must_exist: bool = False,
) -> list[dict[str, Any]]:
    """Validate an optional array of tables.

    Args:
        items: The value found in the config, or ``None`` when absent.
        label: Human-readable context for error messages.
        required_fields: Keys every item must contain.
        must_exist: If ``True``, the list must be present and non-empty.

    Returns:
        The validated list, empty when absent and optional.
    """
    if items is None:
        if must_exist:
            msg = f"{label} must be a non-empty list"
            raise ValueError(msg)
        return []

    if not isinstance(items, list) or (must_exist and len(items) == 0):
        msg = f"{label} must be a non-empty list"
        raise ValueError(msg)

    for idx, item in enumerate(items):
        _validate_mapping(item, required_fields, f"{label}[{idx}]")
    return items


def _validate_mapping(mapping: object, required: set[str], label: str) -> None:
    """Validate that *mapping* is a dict containing all *required* keys.

    Args:
        mapping: The value to validate.
        required: Set of required key names.
        label: Human-readable context for error messages.

    Raises:
        TypeError: If *mapping* is not a dict.
        ValueError: If *mapping* is missing required keys.
    """
    if not isinstance(mapping, dict):
        msg = f"{label} must be a mapping, got {type(mapping).__name__}"
        raise TypeError(msg)
    missing = required - mapping.keys()
    if missing:
        msg = f"{label} is missing required fields: {', '.join(sorted(missing))}"
        raise ValueError(msg)
