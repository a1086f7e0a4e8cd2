"""URL configuration for the booking app.

Includes booking creation, session and day availability, and the staff
ticket endpoints. Mount these under any prefix in the host project::

    urlpatterns = [
        path("api/", include("django_boxoffice.booking.urls")),
    ]
"""

from django.urls import path

from django_boxoffice.booking.views import (
    BookingCreateView,
    DayAvailabilityView,
    SessionAvailabilityView,
    TicketCancelView,
    TicketConfirmView,
)

app_name = "booking"

urlpatterns = [
    path("bookings/", BookingCreateView.as_view(), name="booking-create"),
    path(
        "sessions/<int:session_id>/availability/",
        SessionAvailabilityView.as_view(),
        name="session-availability",
    ),
    path("days/<int:day_id>/availability/", DayAvailabilityView.as_view(), name="day-availability"),
    path("tickets/<str:code>/confirm/", TicketConfirmView.as_view(), name="ticket-confirm"),
    path("tickets/<str:code>/cancel/", TicketCancelView.as_view(), name="ticket-cancel"),
]
