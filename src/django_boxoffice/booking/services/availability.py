"""Availability snapshots derived from session limits and issued tickets.

Provides functions to compute, per session and category, how many seats are
sold (non-cancelled tickets) and how many remain under the configured limit.
Remaining counts are never clamped: a negative value means the session has
been oversold and must stay visible rather than be reported as zero.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from django.db import models

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services.ledger import CategoryCounts, get_limits_bulk
from django_boxoffice.events.models import EventSession


@dataclass(frozen=True, slots=True)
class AvailabilitySnapshot:
    """Derived, non-persisted capacity view of one session.

    Attributes:
        session_id: The session the snapshot describes.
        found: ``False`` when the session does not exist. Limits, sold and
            remaining are then all zero.
        is_open: Whether the session (and its day) accepts bookings.
        limits: Configured ceilings per category.
        sold: Seats held by non-cancelled tickets per category.
        remaining: ``limits - sold`` per category, unclamped.
    """

    session_id: int
    found: bool = True
    is_open: bool = True
    limits: CategoryCounts = field(default_factory=CategoryCounts)
    sold: CategoryCounts = field(default_factory=CategoryCounts)
    remaining: CategoryCounts = field(default_factory=CategoryCounts)

    @property
    def is_sold_out(self) -> bool:
        """Return ``True`` when no category has a seat left."""
        return self.found and all(count <= 0 for _, count in self.remaining.items())

    @property
    def is_oversold(self) -> bool:
        """Return ``True`` when any category has sold past its limit."""
        return any(count < 0 for _, count in self.remaining.items())

    def to_dict(self) -> dict[str, object]:
        """Serialize the snapshot for JSON responses."""
        return {
            "sessionId": self.session_id,
            "found": self.found,
            "isOpen": self.is_open,
            "isSoldOut": self.is_sold_out,
            "limits": self.limits.as_dict(),
            "sold": self.sold.as_dict(),
            "remaining": self.remaining.as_dict(),
        }


def get_sold_counts(session_ids: Iterable[int]) -> dict[int, CategoryCounts]:
    """Return non-cancelled ticket quantities grouped by session and category.

    Pending tickets count as sold until they are confirmed or cancelled (see
    :func:`~django_boxoffice.booking.services.lifecycle.TicketLifecycleService.expire_pending_tickets`
    for how stale holds are released).

    Args:
        session_ids: The sessions to count tickets for.

    Returns:
        A mapping of session id to per-category sold counts. Sessions with no
        tickets are absent.
    """
    rows = (
        Ticket.objects.filter(session_id__in=list(session_ids))
        .exclude(status=Ticket.Status.CANCELLED)
        .values("session_id", "category")
        .annotate(total=models.Sum("quantity"))
    )
    grouped: dict[int, dict[str, int]] = defaultdict(dict)
    for row in rows:
        grouped[row["session_id"]][row["category"]] = row["total"] or 0
    return {session_id: CategoryCounts.from_mapping(counts) for session_id, counts in grouped.items()}


def compute_availability(session_ids: Iterable[int]) -> dict[int, AvailabilitySnapshot]:
    """Compute availability snapshots for a batch of sessions.

    Limits are fetched in one query and sold counts in one grouped aggregate.
    Unknown session ids do not abort the batch; they come back with
    ``found=False`` and zero limits so that listings degrade per row.

    Args:
        session_ids: The sessions to compute availability for.

    Returns:
        A mapping of every requested session id to its snapshot.
    """
    ids = list(dict.fromkeys(session_ids))
    limits = get_limits_bulk(ids)
    open_ids = set(
        EventSession.objects.filter(pk__in=limits.keys(), is_active=True, day__is_active=True).values_list(
            "pk", flat=True
        )
    )
    sold = get_sold_counts(limits.keys())

    snapshots: dict[int, AvailabilitySnapshot] = {}
    for session_id in ids:
        if session_id not in limits:
            snapshots[session_id] = AvailabilitySnapshot(session_id=session_id, found=False, is_open=False)
            continue
        session_limits = limits[session_id]
        session_sold = sold.get(session_id, CategoryCounts())
        remaining = CategoryCounts(
            **{category.value: limit - session_sold.get(category) for category, limit in session_limits.items()}
        )
        snapshots[session_id] = AvailabilitySnapshot(
            session_id=session_id,
            is_open=session_id in open_ids,
            limits=session_limits,
            sold=session_sold,
            remaining=remaining,
        )
    return snapshots


def get_session_availability(session_id: int) -> AvailabilitySnapshot:
    """Return the availability snapshot of a single session."""
    return compute_availability([session_id])[session_id]


def get_day_availability(day_id: int) -> list[AvailabilitySnapshot]:
    """Return snapshots for every session on an event day, in schedule order."""
    session_ids = list(EventSession.objects.filter(day_id=day_id).values_list("pk", flat=True))
    snapshots = compute_availability(session_ids)
    return [snapshots[session_id] for session_id in session_ids]
