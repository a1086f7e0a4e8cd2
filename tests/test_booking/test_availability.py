"""Tests for availability snapshots in django_boxoffice.booking.services.availability."""

from datetime import time

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext

from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services.availability import (
    compute_availability,
    get_day_availability,
    get_session_availability,
    get_sold_counts,
)
from django_boxoffice.booking.services.ledger import CategoryCounts
from django_boxoffice.events.models import Category, EventDay


@pytest.mark.django_db
class TestGetSoldCounts:
    def test_sums_non_cancelled_tickets_per_category(self, session, make_ticket):
        make_ticket(session, category=Category.ADULT, quantity=2, status=Ticket.Status.ACTIVE)
        make_ticket(session, category=Category.ADULT, quantity=1, status=Ticket.Status.PENDING)
        make_ticket(session, category=Category.CHILD, quantity=1)
        make_ticket(session, category=Category.ADULT, quantity=4, status=Ticket.Status.CANCELLED)

        sold = get_sold_counts([session.pk])

        assert sold[session.pk] == CategoryCounts(adult=3, student=0, child=1)

    def test_sessions_without_tickets_are_absent(self, session):
        assert get_sold_counts([session.pk]) == {}


@pytest.mark.django_db
class TestComputeAvailability:
    def test_remaining_is_limit_minus_sold(self, session, make_ticket):
        make_ticket(session, category=Category.ADULT, quantity=3)
        make_ticket(session, category=Category.STUDENT, quantity=5)

        snapshot = compute_availability([session.pk])[session.pk]

        assert snapshot.found is True
        assert snapshot.is_open is True
        assert snapshot.limits == CategoryCounts(adult=10, student=5, child=5)
        assert snapshot.sold == CategoryCounts(adult=3, student=5, child=0)
        assert snapshot.remaining == CategoryCounts(adult=7, student=0, child=5)
        assert snapshot.is_sold_out is False

    def test_remaining_is_not_clamped_when_oversold(self, make_session, make_ticket):
        session = make_session(adult=2, student=0, child=0)
        make_ticket(session, category=Category.ADULT, quantity=3, book=False)

        snapshot = get_session_availability(session.pk)

        assert snapshot.remaining.adult == -1
        assert snapshot.is_oversold is True
        assert snapshot.is_sold_out is True

    def test_unknown_ids_are_flagged_without_aborting_batch(self, session):
        snapshots = compute_availability([session.pk, 999_999])

        assert snapshots[session.pk].found is True
        missing = snapshots[999_999]
        assert missing.found is False
        assert missing.is_open is False
        assert missing.limits == CategoryCounts()
        assert missing.remaining == CategoryCounts()
        assert missing.is_sold_out is False

    def test_closed_sessions_are_reported(self, make_session):
        inactive = make_session(is_active=False)
        snapshot = get_session_availability(inactive.pk)
        assert snapshot.found is True
        assert snapshot.is_open is False

    def test_batch_uses_constant_number_of_queries(self, make_session, make_ticket):
        sessions = [make_session() for _ in range(5)]
        for session in sessions:
            make_ticket(session, quantity=1)

        with CaptureQueriesContext(connection) as ctx:
            snapshots = compute_availability([session.pk for session in sessions])

        assert len(snapshots) == 5
        assert len(ctx.captured_queries) == 3

    def test_duplicate_ids_are_collapsed(self, session):
        snapshots = compute_availability([session.pk, session.pk])
        assert list(snapshots) == [session.pk]

    def test_requery_without_writes_is_idempotent(self, session, make_ticket):
        make_ticket(session, quantity=2)
        assert get_session_availability(session.pk) == get_session_availability(session.pk)

    def test_to_dict(self, session, make_ticket):
        make_ticket(session, category=Category.CHILD, quantity=2)

        data = get_session_availability(session.pk).to_dict()

        assert data == {
            "sessionId": session.pk,
            "found": True,
            "isOpen": True,
            "isSoldOut": False,
            "limits": {"adult": 10, "student": 5, "child": 5},
            "sold": {"adult": 0, "student": 0, "child": 2},
            "remaining": {"adult": 10, "student": 5, "child": 3},
        }


@pytest.mark.django_db
class TestGetDayAvailability:
    def test_returns_sessions_in_schedule_order(self, event_day, make_session):
        afternoon = make_session(name="Afternoon", start=time(14, 0))
        morning = make_session(name="Morning", start=time(9, 0))
        other_day = EventDay.objects.create(name="Other", date=event_day.date.replace(day=2))
        make_session(day=other_day)

        snapshots = get_day_availability(event_day.pk)

        assert [snapshot.session_id for snapshot in snapshots] == [morning.pk, afternoon.pk]

    def test_inactive_day_closes_every_session(self, event_day, session):
        event_day.is_active = False
        event_day.save()

        [snapshot] = get_day_availability(event_day.pk)

        assert snapshot.is_open is False
