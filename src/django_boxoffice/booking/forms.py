"""Forms for the booking app.

``BookingRequestForm`` is the strict boundary between the JSON body of
``POST /bookings/`` and the reservation service: unknown keys, malformed
values and missing purchaser details are rejected here, before anything
reaches validation.
"""

from collections.abc import Mapping
from typing import Any

from django import forms
from django.core.validators import RegexValidator

from django_boxoffice.booking.services.reservation import BookingRequest
from django_boxoffice.booking.services.writer import PurchaserInfo

_PAYLOAD_FIELDS: dict[str, str] = {
    "sessionId": "session_id",
    "adultQuantity": "adult_quantity",
    "studentQuantity": "student_quantity",
    "childQuantity": "child_quantity",
}

_PURCHASER_FIELDS: dict[str, str] = {
    "fullName": "full_name",
    "phone": "phone",
    "email": "email",
    "studentId": "student_id",
    "institution": "institution",
}

phone_validator = RegexValidator(
    regex=r"^\+?\d{9,15}$",
    message="Enter a phone number of 9 to 15 digits, optionally starting with '+'.",
)


class BookingRequestForm(forms.Form):
    """Validate a booking request body.

    Quantities are only checked for being integers here. Negative values
    are the reservation validator's ``InvalidQuantity`` concern so that the
    service contract holds for every caller, not just HTTP.
    """

    session_id = forms.IntegerField()
    adult_quantity = forms.IntegerField(required=False)
    student_quantity = forms.IntegerField(required=False)
    child_quantity = forms.IntegerField(required=False)

    full_name = forms.CharField(max_length=255)
    phone = forms.CharField(max_length=20, validators=[phone_validator])
    email = forms.EmailField(required=False)
    student_id = forms.CharField(max_length=50, required=False)
    institution = forms.CharField(max_length=100, required=False)

    def __init__(
        self,
        *args: Any,
        unknown_fields: list[str] | None = None,
        invalid_fields: list[str] | None = None,
        payload_error: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.unknown_fields = unknown_fields or []
        self.invalid_fields = invalid_fields or []
        self.payload_error = payload_error

    @classmethod
    def from_payload(cls, payload: object) -> "BookingRequestForm":
        """Build a bound form from a decoded JSON body.

        Top-level keys use the public camelCase names (``sessionId``,
        ``adultQuantity`` ...) and purchaser details sit in a nested
        ``purchaserInfo`` object. Any other key is recorded as unknown, and
        booleans, arrays or objects where a scalar belongs are recorded as
        invalid; both fail validation.
        """
        if not isinstance(payload, Mapping):
            return cls(data={}, payload_error="Request body must be a JSON object.")

        data: dict[str, object] = {}
        unknown: list[str] = []
        invalid: list[str] = []

        def _take(field_name: str, value: object) -> None:
            if isinstance(value, (bool, list, dict)):
                invalid.append(field_name)
            elif value is not None:
                data[field_name] = value

        for key, value in payload.items():
            if key in _PAYLOAD_FIELDS:
                _take(_PAYLOAD_FIELDS[key], value)
            elif key == "purchaserInfo":
                if not isinstance(value, Mapping):
                    invalid.append("purchaser_info")
                    continue
                for sub_key, sub_value in value.items():
                    if sub_key in _PURCHASER_FIELDS:
                        _take(_PURCHASER_FIELDS[sub_key], sub_value)
                    else:
                        unknown.append(f"purchaserInfo.{sub_key}")
            else:
                unknown.append(key)
        return cls(data=data, unknown_fields=unknown, invalid_fields=invalid)

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        if self.payload_error:
            raise forms.ValidationError(self.payload_error)
        for field_name in self.invalid_fields:
            if field_name in self.fields:
                self.add_error(field_name, "Expected a single value.")
            else:
                self.add_error(None, "purchaserInfo must be an object.")
        if self.unknown_fields:
            raise forms.ValidationError(f"Unknown fields: {', '.join(sorted(self.unknown_fields))}")
        return cleaned

    def to_booking(self) -> tuple[BookingRequest, PurchaserInfo]:
        """Return the service inputs for a valid form."""
        data = self.cleaned_data
        request = BookingRequest(
            session_id=data["session_id"],
            adult=data.get("adult_quantity") or 0,
            student=data.get("student_quantity") or 0,
            child=data.get("child_quantity") or 0,
        )
        purchaser = PurchaserInfo(
            full_name=data["full_name"],
            phone=data["phone"],
            email=data.get("email") or "",
            student_id=data.get("student_id") or "",
            institution=data.get("institution") or "",
        )
        return request, purchaser
