"""Per-session capacity ledger.

Reads configured category limits and performs the atomic
increment-with-ceiling that makes concurrent bookings safe. Counters live on
:class:`~django_boxoffice.events.models.EventSession` and are only modified
through single conditional ``UPDATE`` statements, so two transactions can never
both push a counter past its ceiling, no matter how many server processes are
running.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from django.db import models
from django.db.models.functions import Greatest
from django.db.models.lookups import LessThanOrEqual

from django_boxoffice.booking.exceptions import BookingConflict, SessionNotFound
from django_boxoffice.events.models import Category, EventSession

logger = logging.getLogger(__name__)

_LIMIT_FIELDS = ("adult_capacity", "student_capacity", "child_capacity")

# Largest value a BigAutoField primary key can hold.
MAX_PRIMARY_KEY = 2**63 - 1


@dataclass(frozen=True, slots=True)
class CategoryCounts:
    """An integer per ticket category."""

    adult: int = 0
    student: int = 0
    child: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, int]) -> "CategoryCounts":
        """Build counts from a ``{category: int}`` mapping, defaulting to zero."""
        return cls(**{category.value: int(data.get(category.value, 0) or 0) for category in Category})

    def get(self, category: str) -> int:
        """Return the count for *category*."""
        return getattr(self, Category(category).value)

    def items(self) -> Iterator[tuple[Category, int]]:
        """Yield ``(category, count)`` pairs in declaration order."""
        for category in Category:
            yield category, getattr(self, category.value)

    @property
    def total(self) -> int:
        """Return the sum across all categories."""
        return self.adult + self.student + self.child

    def as_dict(self) -> dict[str, int]:
        """Return a plain ``{category: count}`` dict."""
        return {category.value: count for category, count in self.items()}


def is_valid_primary_key(value: int) -> bool:
    """Return whether *value* is in the range a stored row's primary key can take.

    Ids outside it cannot name a row, and some backends raise
    ``OverflowError`` instead of matching nothing when they are queried.
    """
    return 1 <= value <= MAX_PRIMARY_KEY


def _limits_from_session(session: EventSession) -> CategoryCounts:
    return CategoryCounts(
        adult=session.adult_capacity,
        student=session.student_capacity,
        child=session.child_capacity,
    )


def get_limits(session_id: int) -> CategoryCounts:
    """Return the configured capacity limits for a session.

    Args:
        session_id: Primary key of the session.

    Returns:
        The per-category limits.

    Raises:
        SessionNotFound: If no such session exists.
    """
    if not is_valid_primary_key(session_id):
        raise SessionNotFound(session_id)
    try:
        session = EventSession.objects.only(*_LIMIT_FIELDS).get(pk=session_id)
    except EventSession.DoesNotExist as exc:
        raise SessionNotFound(session_id) from exc
    return _limits_from_session(session)


def get_limits_bulk(session_ids: Iterable[int]) -> dict[int, CategoryCounts]:
    """Return limits for every existing session in *session_ids* in one query.

    Unknown ids are simply absent from the result.
    """
    ids = [session_id for session_id in session_ids if is_valid_primary_key(session_id)]
    rows = EventSession.objects.filter(pk__in=ids).values("pk", *_LIMIT_FIELDS)
    return {
        row["pk"]: CategoryCounts(
            adult=row["adult_capacity"],
            student=row["student_capacity"],
            child=row["child_capacity"],
        )
        for row in rows
    }


def lock_session(session_id: int) -> EventSession:
    """Fetch a session with a row-level lock held until the transaction ends.

    Serializes concurrent booking attempts on the same session while leaving
    other sessions uncontended. The caller **must** already be inside a
    ``transaction.atomic`` block.

    Raises:
        SessionNotFound: If no such session exists.
    """
    if not is_valid_primary_key(session_id):
        raise SessionNotFound(session_id)
    try:
        return EventSession.objects.select_for_update().select_related("day").get(pk=session_id)
    except EventSession.DoesNotExist as exc:
        raise SessionNotFound(session_id) from exc


def reserve_capacity(session_id: int, quantities: CategoryCounts) -> None:
    """Atomically add *quantities* to the session's booked counters.

    The ``UPDATE`` only matches when every requested category still fits under
    its ceiling after the increment. Categories with a zero quantity are not
    constrained, so lowering one category's capacity below its booked count
    does not block bookings of the other categories.

    Raises:
        BookingConflict: If the conditional update matched no row.
    """
    ceilings: list[LessThanOrEqual] = []
    updates: dict[str, object] = {}
    for category, quantity in quantities.items():
        if quantity <= 0:
            continue
        booked = f"{category.value}_booked"
        ceilings.append(LessThanOrEqual(models.F(booked) + quantity, models.F(f"{category.value}_capacity")))
        updates[booked] = models.F(booked) + quantity

    if not updates:
        return

    updated = EventSession.objects.filter(*ceilings, pk=session_id).update(**updates)
    if updated != 1:
        logger.warning("Capacity write rejected for session %s (requested %s)", session_id, quantities.as_dict())
        raise BookingConflict(session_id)

    EventSession.objects.filter(
        pk=session_id,
        adult_booked__gte=models.F("adult_capacity"),
        student_booked__gte=models.F("student_capacity"),
        child_booked__gte=models.F("child_capacity"),
    ).update(is_sold_out=True)


def release_capacity(session_id: int, quantities: CategoryCounts) -> None:
    """Subtract *quantities* from the session's booked counters.

    Counters are floored at zero and the sold-out flag is cleared, since at
    least one seat has just been freed.
    """
    updates: dict[str, object] = {
        f"{category.value}_booked": Greatest(models.F(f"{category.value}_booked") - quantity, models.Value(0))
        for category, quantity in quantities.items()
        if quantity > 0
    }
    if not updates:
        return
    EventSession.objects.filter(pk=session_id).update(is_sold_out=False, **updates)
