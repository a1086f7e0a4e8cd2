"""Shared fixtures for django-boxoffice tests."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.db.models import F

from django_boxoffice.booking.models import Ticket
from django_boxoffice.events.models import Category, EventDay, EventSession, TicketPrice


@pytest.fixture
def event_day(db):
    return EventDay.objects.create(name="Opening Day", date=date(2027, 6, 1))


@pytest.fixture
def make_session(event_day):
    def _make(*, adult=10, student=5, child=5, name=None, day=None, start=time(9, 0), **extra):
        return EventSession.objects.create(
            day=day or event_day,
            name=name or f"Session {uuid4().hex[:6]}",
            start_time=start,
            end_time=(datetime.combine(date(2027, 6, 1), start) + timedelta(hours=2)).time(),
            adult_capacity=adult,
            student_capacity=student,
            child_capacity=child,
            **extra,
        )

    return _make


@pytest.fixture
def session(make_session):
    return make_session(adult=10, student=5, child=5, name="Morning")


@pytest.fixture
def prices(db):
    return {
        Category.ADULT: TicketPrice.objects.create(category=Category.ADULT, name="Adult", price=Decimal("15000.00")),
        Category.STUDENT: TicketPrice.objects.create(
            category=Category.STUDENT, name="Student", price=Decimal("8000.00")
        ),
        Category.CHILD: TicketPrice.objects.create(category=Category.CHILD, name="Child", price=Decimal("5000.00")),
    }


@pytest.fixture
def make_ticket(db):
    """Create a ticket row directly, optionally bumping the session's booked counter."""

    def _make(session, *, category=Category.ADULT, quantity=1, status=Ticket.Status.ACTIVE, book=True, **extra):
        ticket = Ticket.objects.create(
            session=session,
            reference=extra.pop("reference", f"BKG-{uuid4().hex[:8].upper()}"),
            code=extra.pop("code", uuid4().hex[:8].upper()),
            category=category,
            quantity=quantity,
            status=status,
            purchaser_name=extra.pop("purchaser_name", "Amina Juma"),
            purchaser_phone=extra.pop("purchaser_phone", "0712345678"),
            **extra,
        )
        if book and status != Ticket.Status.CANCELLED:
            field = f"{Category(category).value}_booked"
            EventSession.objects.filter(pk=session.pk).update(**{field: F(field) + quantity})
            session.refresh_from_db()
        return ticket

    return _make
