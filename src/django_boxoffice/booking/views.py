"""JSON views for the booking app.

Public endpoints create bookings and report availability. Staff endpoints
confirm or cancel tickets. Every response is JSON: validation and capacity
problems come back as structured results with a matching status code, and
unexpected errors are logged with full context and answered with a generic
500 body.
"""

import json
import logging

from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from django_boxoffice.booking.forms import BookingRequestForm
from django_boxoffice.booking.models import Ticket
from django_boxoffice.booking.services.availability import get_day_availability, get_session_availability
from django_boxoffice.booking.services.ledger import is_valid_primary_key
from django_boxoffice.booking.services.lifecycle import TicketLifecycleService
from django_boxoffice.booking.services.reservation import (
    CAPACITY_REASONS,
    BookingResult,
    Reject,
    RejectionReason,
    ReservationService,
)
from django_boxoffice.events.models import EventDay

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong while processing your request. Please try again later."

_REASON_STATUS: dict[RejectionReason, int] = {
    RejectionReason.INVALID_REQUEST: 400,
    RejectionReason.INVALID_QUANTITY: 400,
    RejectionReason.EMPTY_REQUEST: 400,
    RejectionReason.SESSION_NOT_FOUND: 404,
    RejectionReason.SESSION_CLOSED: 409,
    RejectionReason.UNAVAILABLE: 503,
    **dict.fromkeys(CAPACITY_REASONS.values(), 409),
}


def _error(message: str, status: int, **extra: object) -> JsonResponse:
    return JsonResponse({"success": False, "message": message, **extra}, status=status)


def _serialize_ticket(ticket: Ticket) -> dict[str, object]:
    return {
        "id": ticket.pk,
        "code": ticket.code,
        "reference": ticket.reference,
        "sessionId": ticket.session_id,
        "category": ticket.category,
        "quantity": ticket.quantity,
        "status": ticket.status,
        "unitPrice": str(ticket.unit_price),
        "totalAmount": str(ticket.total_amount),
        "holdExpiresAt": ticket.hold_expires_at.isoformat() if ticket.hold_expires_at else None,
    }


def booking_result_response(result: BookingResult) -> JsonResponse:
    """Serialize a committed booking as a 201 response."""
    return JsonResponse(
        {
            "success": True,
            "reference": result.reference,
            "tickets": [_serialize_ticket(ticket) for ticket in result.tickets],
            "holdExpiresAt": (
                result.tickets[0].hold_expires_at.isoformat() if result.tickets[0].hold_expires_at else None
            ),
        },
        status=201,
    )


def reject_response(reject: Reject) -> JsonResponse:
    """Serialize a rejection with the status code of its first reason."""
    return JsonResponse(
        {
            "success": False,
            "reasons": [str(reason) for reason in reject.reasons],
            "message": reject.message,
            "availability": reject.availability.to_dict() if reject.availability else None,
        },
        status=_REASON_STATUS[reject.reasons[0]],
    )


def _invalid_request(errors: dict[str, list[str]]) -> JsonResponse:
    reject = Reject(reasons=(RejectionReason.INVALID_REQUEST,))
    return JsonResponse(
        {
            "success": False,
            "reasons": [str(RejectionReason.INVALID_REQUEST)],
            "message": reject.message,
            "errors": errors,
            "availability": None,
        },
        status=400,
    )


def _form_errors(form: BookingRequestForm) -> dict[str, list[str]]:
    return {field: [str(error) for error in errors] for field, errors in form.errors.items()}


@method_decorator(csrf_exempt, name="dispatch")
class BookingCreateView(View):
    """Create a booking from a JSON body.

    Expects::

        {
            "sessionId": 12,
            "adultQuantity": 2,
            "studentQuantity": 0,
            "childQuantity": 1,
            "purchaserInfo": {"fullName": "...", "phone": "0712345678"}
        }
    """

    http_method_names = ["post"]

    def post(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Validate the body and run the booking cycle.

        Args:
            request: The incoming HTTP request.
            **kwargs: Unused URL keyword arguments.

        Returns:
            201 with the created tickets, or a structured rejection.
        """
        try:
            payload = json.loads(request.body or b"null")
        except (UnicodeDecodeError, json.JSONDecodeError):
            return _invalid_request({"__all__": ["Request body must be valid JSON."]})

        form = BookingRequestForm.from_payload(payload)
        if not form.is_valid():
            return _invalid_request(_form_errors(form))

        booking_request, purchaser = form.to_booking()
        try:
            result = ReservationService.book(booking_request, purchaser)
        except Exception:
            logger.exception("Booking failed for session %s", booking_request.session_id)
            return _error(GENERIC_ERROR, 500)

        if isinstance(result, Reject):
            return reject_response(result)
        return booking_result_response(result)


class SessionAvailabilityView(View):
    """Return the availability snapshot of one session."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, session_id: int) -> JsonResponse:  # noqa: ARG002
        """Return the snapshot, or 404 when the session does not exist."""
        try:
            snapshot = get_session_availability(session_id)
        except Exception:
            logger.exception("Availability lookup failed for session %s", session_id)
            return _error(GENERIC_ERROR, 500)

        if not snapshot.found:
            return _error("Session not found.", 404, reasons=[str(RejectionReason.SESSION_NOT_FOUND)])
        return JsonResponse(snapshot.to_dict())


class DayAvailabilityView(View):
    """Return availability snapshots for every session of an event day."""

    http_method_names = ["get"]

    def get(self, request: HttpRequest, day_id: int) -> JsonResponse:  # noqa: ARG002
        """Return the day's sessions in schedule order, or 404 for an unknown day."""
        if not is_valid_primary_key(day_id) or not EventDay.objects.filter(pk=day_id).exists():
            return _error("Event day not found.", 404)
        try:
            snapshots = get_day_availability(day_id)
        except Exception:
            logger.exception("Availability lookup failed for day %s", day_id)
            return _error(GENERIC_ERROR, 500)
        return JsonResponse({"dayId": day_id, "sessions": [snapshot.to_dict() for snapshot in snapshots]})


class TicketPermissionMixin:
    """Require a superuser or the ``boxoffice_booking.change_ticket`` permission.

    API callers get a 403 JSON body instead of a login redirect. The ticket
    is resolved from the ``code`` URL kwarg and stored on ``self.ticket``.
    """

    ticket: Ticket

    def dispatch(self, request: HttpRequest, *args: str, **kwargs: str) -> HttpResponse:
        """Enforce permissions and resolve the ticket before dispatch."""
        user = request.user
        if not user.is_authenticated:
            return _error("Authentication required.", 403)
        if not (user.is_superuser or user.has_perm("boxoffice_booking.change_ticket")):
            return _error("You do not have permission to manage tickets.", 403)

        ticket = Ticket.objects.filter(code=kwargs.get("code", "")).first()
        if ticket is None:
            return _error("Ticket not found.", 404)
        self.ticket = ticket
        return super().dispatch(request, *args, **kwargs)  # type: ignore[misc]


@method_decorator(csrf_exempt, name="dispatch")
class TicketConfirmView(TicketPermissionMixin, View):
    """Mark a pending ticket as paid."""

    http_method_names = ["post"]

    def post(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Confirm ``self.ticket``, returning 400 for an illegal transition."""
        try:
            ticket = TicketLifecycleService.confirm_ticket(self.ticket)
        except ValidationError as exc:
            return _error(exc.messages[0], 400)
        return JsonResponse({"success": True, "ticket": _serialize_ticket(ticket)})


@method_decorator(csrf_exempt, name="dispatch")
class TicketCancelView(TicketPermissionMixin, View):
    """Cancel a pending or active ticket and free its seats."""

    http_method_names = ["post"]

    def post(self, request: HttpRequest, **kwargs: str) -> JsonResponse:  # noqa: ARG002
        """Cancel ``self.ticket``, returning 400 for an illegal transition."""
        try:
            ticket = TicketLifecycleService.cancel_ticket(self.ticket)
        except ValidationError as exc:
            return _error(exc.messages[0], 400)
        return JsonResponse({"success": True, "ticket": _serialize_ticket(ticket)})
