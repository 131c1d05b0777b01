from datetime import date, datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_datetime

DISPLAY_FORMAT = "%I:%M %p"      # '9:00 AM'
DATE_FORMAT = "%Y-%m-%d"


def format_hour(hour: int) -> str:
    """
    Render a whole hour of the day as '9:00 AM' / '6:00 PM' for messages.
    """
    return time(hour % 24, 0).strftime(DISPLAY_FORMAT).lstrip("0")


def parse_timestamp(value):
    """
    Turn an ISO-8601 date-time (string or datetime) into an aware datetime
    in the scheduling time zone (settings.TIME_ZONE).

    Naive values are taken as wall-clock time in that zone; values with an
    offset are converted into it. Returns None if the value can't be parsed.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        try:
            dt = parse_datetime(value.strip())
        except ValueError:
            return None
        if dt is None:
            return None
    else:
        return None

    if timezone.is_naive(dt):
        return timezone.make_aware(dt)
    return timezone.localtime(dt)


def parse_date(value):
    """
    Parse a date string in 'YYYY-MM-DD' format into a date object.
    Returns None if parsing fails.
    """
    if not value:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def local_date(dt: datetime) -> date:
    """Calendar day of an aware datetime in the scheduling time zone."""
    return timezone.localtime(dt).date()


def at_hour(day: date, hour: int, minute: int = 0) -> datetime:
    """Aware datetime for a wall-clock time on the given day."""
    return timezone.make_aware(datetime.combine(day, time(hour, minute)))


def to_iso(dt):
    if dt is None:
        return None
    return timezone.localtime(dt).isoformat()


def overlaps(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """
    Half-open interval overlap: [start1, end1) and [start2, end2) share time.
    Touching endpoints (one ends exactly when the other starts) don't overlap.
    """
    return start1 < end2 and end1 > start2
