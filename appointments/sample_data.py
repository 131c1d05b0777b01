"""
Sample bookings: one individual counseling session and one group session,
for two different counselors.
"""
import logging
from datetime import timedelta

from django.utils import timezone

from .exceptions import AppointmentConflict
from .utils.time_utils import at_hour

logger = logging.getLogger(__name__)

SAMPLE_APPOINTMENTS = [
    {
        "title": "Counseling Session",
        "hours": (10, 0, 11, 0),
        "counselor_id": "counselor1",
        "client_name": "John Doe",
        "client_email": "john@example.com",
        "status": "confirmed",
        "type": "individual",
        "notes": "Initial consultation",
    },
    {
        "title": "Group Therapy",
        "hours": (14, 0, 15, 30),
        "counselor_id": "counselor2",
        "client_name": "Jane Smith",
        "client_email": "jane@example.com",
        "status": "confirmed",
        "type": "group",
        "notes": "Anxiety support group",
    },
]


def next_open_day(scheduler, days_ahead=1):
    """First day at least days_ahead from today that isn't a closed weekday."""
    day = timezone.localdate() + timedelta(days=days_ahead)
    while day.weekday() in scheduler.rules.closed_weekdays:
        day += timedelta(days=1)
    return day


def seed_sample_appointments(scheduler, days_ahead=1):
    """
    Book the samples through scheduler.create on the next open day.
    Samples that collide with existing bookings are skipped.

    Returns:
        (booked, skipped): stored Appointments and titles that conflicted
    """
    day = next_open_day(scheduler, days_ahead)
    booked, skipped = [], []

    for sample in SAMPLE_APPOINTMENTS:
        data = dict(sample)
        start_h, start_m, end_h, end_m = data.pop("hours")
        data["start"] = at_hour(day, start_h, start_m)
        data["end"] = at_hour(day, end_h, end_m)

        try:
            booked.append(scheduler.create(data))
        except AppointmentConflict:
            logger.info("Sample %r already booked on %s, skipping", sample["title"], day)
            skipped.append(sample["title"])

    return booked, skipped
