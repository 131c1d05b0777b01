from django import forms

from .exceptions import AppointmentValidationError
from .models import EDITABLE_FIELDS
from .utils.time_utils import DATE_FORMAT

# JSON key -> Appointment attribute
WIRE_FIELDS = {
    "title": "title",
    "start": "start",
    "end": "end",
    "counselorId": "counselor_id",
    "resourceId": "counselor_id",
    "clientName": "client_name",
    "clientEmail": "client_email",
    "status": "status",
    "type": "type",
    "notes": "notes",
}


def appointment_data(payload) -> dict:
    """
    Map a camelCase request body onto Appointment attribute names.
    Unknown keys (and client-sent id/createdAt/updatedAt) are dropped.
    'resourceId' is an alias of 'counselorId'; the latter wins if both are sent.
    """
    if not isinstance(payload, dict):
        raise AppointmentValidationError(["Request body must be a JSON object"])

    data = {}
    for key, value in payload.items():
        if key == "resourceId" and "counselorId" in payload:
            continue
        name = WIRE_FIELDS.get(key) or (key if key in EDITABLE_FIELDS else None)
        if name is not None:
            data[name] = value
    return data


def form_errors(form) -> list:
    """Flatten a bound form's errors into a list of messages."""
    return [message for messages in form.errors.values() for message in messages]


class AppointmentFilterForm(forms.Form):
    """
    Query string of the list endpoint. Every filter is optional and
    they combine with AND.
    """

    resourceId = forms.CharField(required=False)
    counselorId = forms.CharField(required=False)
    date = forms.DateField(
        required=False,
        input_formats=[DATE_FORMAT],
        error_messages={"invalid": "Date must be in YYYY-MM-DD format"},
    )
    status = forms.CharField(required=False)

    def filters(self) -> dict:
        cleaned = self.cleaned_data
        return {
            "counselor_id": cleaned.get("counselorId") or cleaned.get("resourceId") or None,
            "day": cleaned.get("date"),
            "status": cleaned.get("status") or None,
        }


class AvailabilityForm(forms.Form):
    date = forms.DateField(
        input_formats=[DATE_FORMAT],
        error_messages={
            "required": "Date parameter is required",
            "invalid": "Date must be in YYYY-MM-DD format",
        },
    )
