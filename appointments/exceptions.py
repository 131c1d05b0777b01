from django.core.exceptions import ObjectDoesNotExist, ValidationError


class AppointmentValidationError(ValidationError):
    """
    Candidate appointment broke one or more booking rules.
    Always built from the full violation list so callers can show every problem at once.
    """

    def __init__(self, violations):
        super().__init__(list(violations))


class AppointmentConflict(Exception):
    """Requested interval overlaps an active booking for the same counselor."""

    def __init__(self, conflicts):
        self.conflict_ids = [appt.id for appt in conflicts]
        super().__init__(
            "The selected time slot is already booked"
        )


class AppointmentNotFound(ObjectDoesNotExist):
    def __init__(self, appointment_id):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} not found")
