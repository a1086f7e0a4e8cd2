"""Tests for the capacity ledger in django_boxoffice.booking.services.ledger."""

import pytest
from django.db import transaction

from django_boxoffice.booking.exceptions import BookingConflict, SessionNotFound
from django_boxoffice.booking.services import ledger
from django_boxoffice.booking.services.ledger import CategoryCounts
from django_boxoffice.events.models import Category


class TestCategoryCounts:
    def test_from_mapping_defaults_missing_categories_to_zero(self):
        counts = CategoryCounts.from_mapping({"adult": 3})
        assert counts == CategoryCounts(adult=3, student=0, child=0)

    def test_get_accepts_category_or_string(self):
        counts = CategoryCounts(adult=1, student=2, child=3)
        assert counts.get(Category.STUDENT) == 2
        assert counts.get("child") == 3

    def test_items_yields_declaration_order(self):
        counts = CategoryCounts(adult=1, student=2, child=3)
        assert list(counts.items()) == [(Category.ADULT, 1), (Category.STUDENT, 2), (Category.CHILD, 3)]

    def test_total_and_as_dict(self):
        counts = CategoryCounts(adult=1, student=2, child=3)
        assert counts.total == 6
        assert counts.as_dict() == {"adult": 1, "student": 2, "child": 3}


@pytest.mark.django_db
class TestGetLimits:
    def test_returns_configured_limits(self, make_session):
        session = make_session(adult=5, student=3, child=0)
        assert ledger.get_limits(session.pk) == CategoryCounts(adult=5, student=3, child=0)

    def test_unknown_session_raises(self):
        with pytest.raises(SessionNotFound) as excinfo:
            ledger.get_limits(999_999)
        assert excinfo.value.session_id == 999_999

    def test_bulk_skips_unknown_ids(self, make_session):
        first = make_session(adult=1)
        second = make_session(adult=2)

        limits = ledger.get_limits_bulk([first.pk, second.pk, 999_999])

        assert set(limits) == {first.pk, second.pk}
        assert limits[second.pk].adult == 2

    @pytest.mark.parametrize("session_id", [0, -1, 2**63, 2**70])
    def test_out_of_range_ids_are_unknown(self, session, session_id):
        with pytest.raises(SessionNotFound):
            ledger.get_limits(session_id)
        assert set(ledger.get_limits_bulk([session.pk, session_id])) == {session.pk}


@pytest.mark.django_db
class TestLockSession:
    def test_locks_existing_session(self, session):
        with transaction.atomic():
            locked = ledger.lock_session(session.pk)
        assert locked.pk == session.pk
        assert locked.day.name == "Opening Day"

    def test_unknown_session_raises(self):
        with transaction.atomic(), pytest.raises(SessionNotFound):
            ledger.lock_session(999_999)

    def test_out_of_range_id_raises(self):
        with transaction.atomic(), pytest.raises(SessionNotFound):
            ledger.lock_session(2**70)


def test_primary_key_range():
    assert ledger.is_valid_primary_key(1)
    assert ledger.is_valid_primary_key(ledger.MAX_PRIMARY_KEY)
    assert not ledger.is_valid_primary_key(0)
    assert not ledger.is_valid_primary_key(ledger.MAX_PRIMARY_KEY + 1)


@pytest.mark.django_db
class TestReserveCapacity:
    def test_increments_booked_counters(self, session):
        ledger.reserve_capacity(session.pk, CategoryCounts(adult=2, child=1))

        session.refresh_from_db()
        assert (session.adult_booked, session.student_booked, session.child_booked) == (2, 0, 1)
        assert session.is_sold_out is False

    def test_allows_filling_to_exact_capacity(self, make_session):
        session = make_session(adult=3, student=0, child=0)

        ledger.reserve_capacity(session.pk, CategoryCounts(adult=3))

        session.refresh_from_db()
        assert session.adult_booked == 3
        assert session.is_sold_out is True

    def test_rejects_write_past_ceiling(self, make_session):
        session = make_session(adult=3, student=5, child=5, adult_booked=2)

        with pytest.raises(BookingConflict) as excinfo:
            ledger.reserve_capacity(session.pk, CategoryCounts(adult=2, student=1))

        assert excinfo.value.session_id == session.pk
        session.refresh_from_db()
        assert session.adult_booked == 2
        assert session.student_booked == 0

    def test_zero_categories_are_not_constrained(self, make_session):
        # Child is already over its (lowered) limit; adult bookings still go through.
        session = make_session(adult=5, student=0, child=1, child_booked=3)

        ledger.reserve_capacity(session.pk, CategoryCounts(adult=1))

        session.refresh_from_db()
        assert session.adult_booked == 1

    def test_unknown_session_conflicts(self):
        with pytest.raises(BookingConflict):
            ledger.reserve_capacity(999_999, CategoryCounts(adult=1))

    def test_empty_quantities_are_a_no_op(self, session):
        ledger.reserve_capacity(session.pk, CategoryCounts())
        session.refresh_from_db()
        assert session.adult_booked == 0

    def test_sold_out_needs_every_category_exhausted(self, make_session):
        session = make_session(adult=2, student=1, child=0)

        ledger.reserve_capacity(session.pk, CategoryCounts(adult=2))
        session.refresh_from_db()
        assert session.is_sold_out is False

        ledger.reserve_capacity(session.pk, CategoryCounts(student=1))
        session.refresh_from_db()
        assert session.is_sold_out is True


@pytest.mark.django_db
class TestReleaseCapacity:
    def test_decrements_and_clears_sold_out(self, make_session):
        session = make_session(adult=2, student=0, child=0, adult_booked=2, is_sold_out=True)

        ledger.release_capacity(session.pk, CategoryCounts(adult=1))

        session.refresh_from_db()
        assert session.adult_booked == 1
        assert session.is_sold_out is False

    def test_counters_are_floored_at_zero(self, make_session):
        session = make_session(adult=2, adult_booked=1)

        ledger.release_capacity(session.pk, CategoryCounts(adult=5))

        session.refresh_from_db()
        assert session.adult_booked == 0
