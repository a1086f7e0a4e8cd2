"""Tests for the booking request boundary form."""

import pytest

from django_boxoffice.booking.forms import BookingRequestForm
from django_boxoffice.booking.services.reservation import BookingRequest
from django_boxoffice.booking.services.writer import PurchaserInfo

VALID_PAYLOAD = {
    "sessionId": 4,
    "adultQuantity": 2,
    "studentQuantity": 0,
    "childQuantity": 1,
    "purchaserInfo": {
        "fullName": "Amina Juma",
        "phone": "+255712345678",
        "email": "amina@example.com",
    },
}


def _payload(**overrides):
    data = {**VALID_PAYLOAD, "purchaserInfo": dict(VALID_PAYLOAD["purchaserInfo"])}
    purchaser = overrides.pop("purchaserInfo", None)
    if purchaser is not None:
        data["purchaserInfo"].update(purchaser)
    data.update(overrides)
    return data


class TestBookingRequestForm:
    def test_valid_payload_maps_to_service_inputs(self):
        form = BookingRequestForm.from_payload(VALID_PAYLOAD)

        assert form.is_valid(), form.errors
        request, purchaser = form.to_booking()
        assert request == BookingRequest(session_id=4, adult=2, student=0, child=1)
        assert purchaser == PurchaserInfo(
            full_name="Amina Juma",
            phone="+255712345678",
            email="amina@example.com",
        )

    def test_missing_quantities_default_to_zero(self):
        payload = {"sessionId": 4, "adultQuantity": 1, "purchaserInfo": {"fullName": "A", "phone": "0712345678"}}
        form = BookingRequestForm.from_payload(payload)

        assert form.is_valid(), form.errors
        request, _ = form.to_booking()
        assert (request.student, request.child) == (0, 0)

    def test_negative_quantities_pass_the_boundary(self):
        form = BookingRequestForm.from_payload(_payload(adultQuantity=-1))

        assert form.is_valid(), form.errors
        assert form.to_booking()[0].adult == -1

    def test_unknown_top_level_field_is_rejected(self):
        form = BookingRequestForm.from_payload(_payload(seat="A1"))

        assert not form.is_valid()
        assert "Unknown fields: seat" in form.errors["__all__"][0]

    def test_unknown_purchaser_field_is_rejected(self):
        form = BookingRequestForm.from_payload(_payload(purchaserInfo={"age": 30}))

        assert not form.is_valid()
        assert "purchaserInfo.age" in form.errors["__all__"][0]

    @pytest.mark.parametrize("value", [True, [1], {"n": 1}, "two", 1.5])
    def test_malformed_quantity_is_rejected(self, value):
        form = BookingRequestForm.from_payload(_payload(adultQuantity=value))

        assert not form.is_valid()
        assert "adult_quantity" in form.errors

    def test_missing_session_is_rejected(self):
        payload = _payload()
        del payload["sessionId"]
        form = BookingRequestForm.from_payload(payload)

        assert not form.is_valid()
        assert "session_id" in form.errors

    def test_missing_purchaser_info_is_rejected(self):
        payload = _payload()
        del payload["purchaserInfo"]
        form = BookingRequestForm.from_payload(payload)

        assert not form.is_valid()
        assert {"full_name", "phone"} <= set(form.errors)

    def test_purchaser_info_must_be_an_object(self):
        form = BookingRequestForm.from_payload({**_payload(), "purchaserInfo": "Amina"})

        assert not form.is_valid()
        assert "purchaserInfo must be an object." in form.errors["__all__"]

    @pytest.mark.parametrize("phone", ["12345", "07123abc45", "+2557123456789012"])
    def test_invalid_phone_is_rejected(self, phone):
        form = BookingRequestForm.from_payload(_payload(purchaserInfo={"phone": phone}))

        assert not form.is_valid()
        assert "phone" in form.errors

    def test_invalid_email_is_rejected(self):
        form = BookingRequestForm.from_payload(_payload(purchaserInfo={"email": "not-an-email"}))

        assert not form.is_valid()
        assert "email" in form.errors

    @pytest.mark.parametrize("payload", [[], "booking", 42, None])
    def test_non_object_payload_is_rejected(self, payload):
        form = BookingRequestForm.from_payload(payload)

        assert not form.is_valid()
        assert "Request body must be a JSON object." in form.errors["__all__"]
