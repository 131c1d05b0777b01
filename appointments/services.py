"""
Appointment scheduler: validation, per-counselor conflict detection,
booking lifecycle and free-slot availability over an in-memory book.
"""
import logging
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from .exceptions import AppointmentConflict, AppointmentNotFound, AppointmentValidationError
from .models import EDITABLE_FIELDS, STATUS_VALUES, Appointment, AppointmentBook
from .utils.time_utils import at_hour, format_hour, local_date, overlaps, parse_date, parse_timestamp

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ("title", "Title"),
    ("start", "Start time"),
    ("end", "End time"),
    ("counselor_id", "Counselor ID"),
    ("client_name", "Client name"),
    ("client_email", "Client email"),
)

TEXT_FIELDS = ("title", "counselor_id", "client_name", "client_email", "status", "type", "notes")

CLOSED_DAY_REASON = "Weekends are not available for appointments"
FULLY_BOOKED_REASON = "All slots are booked for this day"
INVALID_DATE_MESSAGE = "Date must be in YYYY-MM-DD format"


@dataclass(frozen=True)
class SchedulingRules:
    business_hours_start: int = 9
    business_hours_end: int = 18
    slot_minutes: int = 60
    # Monday is 0
    closed_weekdays: tuple = (5, 6)

    @classmethod
    def from_settings(cls) -> "SchedulingRules":
        conf = getattr(settings, "APPOINTMENTS", {})
        rules = cls(
            business_hours_start=int(conf.get("BUSINESS_HOURS_START", cls.business_hours_start)),
            business_hours_end=int(conf.get("BUSINESS_HOURS_END", cls.business_hours_end)),
            slot_minutes=int(conf.get("SLOT_MINUTES", cls.slot_minutes)),
            closed_weekdays=tuple(conf.get("CLOSED_WEEKDAYS", cls.closed_weekdays)),
        )
        if not 0 <= rules.business_hours_start < rules.business_hours_end <= 23:
            raise ImproperlyConfigured(
                "APPOINTMENTS business hours must satisfy 0 <= start < end <= 23"
            )
        if rules.slot_minutes <= 0:
            raise ImproperlyConfigured("APPOINTMENTS['SLOT_MINUTES'] must be positive")
        return rules

    @property
    def hours_message(self) -> str:
        return (
            f"Appointments must be scheduled between "
            f"{format_hour(self.business_hours_start)} and {format_hour(self.business_hours_end)}"
        )


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _editable(data) -> Dict:
    """
    Keep only the fields a caller may set, with text values trimmed.
    """
    fields = {}
    for name in EDITABLE_FIELDS:
        if name not in data:
            continue
        value = data[name]
        if name in TEXT_FIELDS and value is not None and not isinstance(value, str):
            value = str(value)
        if isinstance(value, str):
            value = value.strip()
        fields[name] = value
    return fields


class AppointmentScheduler:
    """
    Owns an AppointmentBook and is its only mutator.

    Every public operation runs under one lock, so a validate / conflict
    check / commit sequence is atomic with respect to other writers.
    """

    def __init__(
        self,
        book: Optional[AppointmentBook] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rules: Optional[SchedulingRules] = None,
    ):
        self.book = book if book is not None else AppointmentBook()
        self.clock = clock or timezone.now
        self.rules = rules or SchedulingRules.from_settings()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def validate(self, candidate) -> List[str]:
        """
        Check a candidate against the booking rules and return every
        violation found (empty list means valid). Conflicts are checked
        separately by find_conflicts / has_conflict.
        """
        errors = []

        for field, label in REQUIRED_FIELDS:
            if _is_blank(candidate.get(field)):
                errors.append(f"{label} is required")

        raw_start = candidate.get("start")
        raw_end = candidate.get("end")
        start = parse_timestamp(raw_start)
        end = parse_timestamp(raw_end)

        if not _is_blank(raw_start) and start is None:
            errors.append("Start time must be a valid ISO-8601 date-time")
        if not _is_blank(raw_end) and end is None:
            errors.append("End time must be a valid ISO-8601 date-time")

        if start is not None and end is not None and start >= end:
            errors.append("End time must be after start time")

        if start is not None and start < self.clock():
            errors.append("Appointment cannot be scheduled in the past")

        if not self._within_business_hours(start, end):
            errors.append(self.rules.hours_message)

        if start is not None and end is not None and local_date(start) != local_date(end):
            errors.append("Appointments must start and end on the same day")

        if start is not None and timezone.localtime(start).weekday() in self.rules.closed_weekdays:
            errors.append("Appointments cannot be scheduled on weekends")

        status = candidate.get("status")
        if not _is_blank(status) and status not in STATUS_VALUES:
            errors.append(f"Status must be one of {', '.join(STATUS_VALUES)}")

        return errors

    def _within_business_hours(self, start, end) -> bool:
        opens = self.rules.business_hours_start
        closes = self.rules.business_hours_end

        if start is not None:
            local_start = timezone.localtime(start)
            if local_start.hour < opens or local_start.hour >= closes:
                return False

        if end is not None:
            local_end = timezone.localtime(end)
            if local_end.hour < opens or local_end.time() > time(closes):
                return False

        return True

    def find_conflicts(self, candidate, exclude_id=None) -> List[Appointment]:
        """
        Active appointments of the candidate's counselor whose [start, end)
        overlaps the candidate's. Cancelled bookings never block, and a
        cancelled candidate blocks nothing.
        """
        start = parse_timestamp(candidate.get("start"))
        end = parse_timestamp(candidate.get("end"))
        if start is None or end is None:
            return []
        if candidate.get("status") == Appointment.STATUS_CANCELLED:
            return []

        counselor_id = candidate.get("counselor_id")
        exclude_id = str(exclude_id) if exclude_id is not None else None

        with self._lock:
            return [
                appt for appt in self.book
                if appt.id != exclude_id
                and appt.counselor_id == counselor_id
                and appt.is_active
                and overlaps(start, end, appt.start, appt.end)
            ]

    def has_conflict(self, candidate, exclude_id=None) -> bool:
        return bool(self.find_conflicts(candidate, exclude_id=exclude_id))

    def _check(self, candidate, exclude_id=None) -> None:
        violations = self.validate(candidate)
        if violations:
            logger.debug(
                "Rejected appointment for counselor %s: %s",
                candidate.get("counselor_id"), violations,
            )
            raise AppointmentValidationError(violations)

        conflicts = self.find_conflicts(candidate, exclude_id=exclude_id)
        if conflicts:
            logger.warning(
                "Booking conflict for counselor %s: overlaps %s",
                candidate.get("counselor_id"), [appt.id for appt in conflicts],
            )
            raise AppointmentConflict(conflicts)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, data) -> Appointment:
        """
        Validate, check for conflicts, then store a new appointment.

        Raises:
            AppointmentValidationError: with every broken rule
            AppointmentConflict: the slot overlaps an active booking
        """
        candidate = _editable(data)

        with self._lock:
            self._check(candidate)
            appointment = Appointment(
                id=self.book.next_id(),
                created_at=self.clock(),
                **self._record_fields(candidate),
            )
            self.book.put(appointment)

        logger.info(
            "Created appointment %s for counselor %s at %s",
            appointment.id, appointment.counselor_id, appointment.start.isoformat(),
        )
        return appointment

    def update(self, appointment_id, patch) -> Appointment:
        """
        Merge patch over the stored record and re-run every check, ignoring
        the record itself when looking for conflicts.
        """
        with self._lock:
            current = self.book.get(appointment_id)
            if current is None:
                raise AppointmentNotFound(appointment_id)

            changes = _editable(patch)
            # a blank status keeps the stored one; pending is only a create default
            if _is_blank(changes.get("status")):
                changes.pop("status", None)

            candidate = {name: getattr(current, name) for name in EDITABLE_FIELDS}
            candidate.update(changes)

            self._check(candidate, exclude_id=current.id)
            updated = replace(current, updated_at=self.clock(), **self._record_fields(candidate))
            self.book.put(updated)

        logger.info("Updated appointment %s (status=%s)", updated.id, updated.status)
        return updated

    def cancel(self, appointment_id) -> Appointment:
        """Remove the appointment from the book and return it."""
        with self._lock:
            removed = self.book.remove(appointment_id)
        if removed is None:
            raise AppointmentNotFound(appointment_id)

        logger.info("Cancelled appointment %s for counselor %s", removed.id, removed.counselor_id)
        return removed

    def _record_fields(self, candidate) -> Dict:
        return {
            "title": candidate["title"],
            "start": parse_timestamp(candidate["start"]),
            "end": parse_timestamp(candidate["end"]),
            "counselor_id": candidate["counselor_id"],
            "client_name": candidate["client_name"],
            "client_email": candidate["client_email"],
            "status": candidate.get("status") or Appointment.STATUS_PENDING,
            "type": candidate.get("type") or "",
            "notes": candidate.get("notes") or "",
        }

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, appointment_id) -> Appointment:
        with self._lock:
            appointment = self.book.get(appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)
        return appointment

    def list(self, counselor_id=None, day=None, status=None) -> List[Appointment]:
        """
        Stored appointments, optionally filtered (AND) by counselor,
        calendar day of start and status. Sorted by start, then id.
        """
        if day is not None and not isinstance(day, date):
            parsed = parse_date(day)
            if parsed is None:
                raise AppointmentValidationError([INVALID_DATE_MESSAGE])
            day = parsed

        with self._lock:
            appointments = list(self.book)

        if counselor_id:
            appointments = [a for a in appointments if a.counselor_id == counselor_id]
        if day is not None:
            appointments = [a for a in appointments if local_date(a.start) == day]
        if status:
            appointments = [a for a in appointments if a.status == status]

        return sorted(appointments, key=lambda a: (a.start, int(a.id)))

    def list_availability(self, counselor_id, day) -> Dict:
        """
        Free fixed-length slots for one counselor on one day.

        Returns:
            {"available": bool, "slots": [{"start": datetime, "end": datetime}], "reason": str | None}

        Closed weekdays short-circuit with no slots. Otherwise every slot
        between opening and closing is kept unless it overlaps an active
        booking of that counselor.
        """
        target = parse_date(day)
        if target is None:
            raise AppointmentValidationError([INVALID_DATE_MESSAGE])

        if target.weekday() in self.rules.closed_weekdays:
            return {"available": False, "slots": [], "reason": CLOSED_DAY_REASON}

        with self._lock:
            booked = [
                appt for appt in self.book
                if appt.counselor_id == counselor_id
                and appt.is_active
                and local_date(appt.start) <= target <= local_date(appt.end)
            ]

        slots = []
        for slot_start, slot_end in self._day_slots(target):
            if any(overlaps(slot_start, slot_end, appt.start, appt.end) for appt in booked):
                continue
            slots.append({"start": slot_start, "end": slot_end})

        return {
            "available": bool(slots),
            "slots": slots,
            "reason": None if slots else FULLY_BOOKED_REASON,
        }

    def _day_slots(self, day: date):
        step = timedelta(minutes=self.rules.slot_minutes)
        slot_start = at_hour(day, self.rules.business_hours_start)
        closing = at_hour(day, self.rules.business_hours_end)
        while slot_start + step <= closing:
            yield slot_start, slot_start + step
            slot_start += step

    def clear(self) -> None:
        with self._lock:
            self.book.clear()


# Process-wide scheduler used by the views
_scheduler: Optional[AppointmentScheduler] = None
_scheduler_lock = threading.Lock()


def get_scheduler() -> AppointmentScheduler:
    """Get or create the shared scheduler instance."""
    global _scheduler
    with _scheduler_lock:
        if _scheduler is None:
            _scheduler = AppointmentScheduler()
        return _scheduler


def reset_scheduler(scheduler: Optional[AppointmentScheduler] = None) -> AppointmentScheduler:
    """Swap in a fresh (or given) scheduler, dropping every stored appointment."""
    global _scheduler
    with _scheduler_lock:
        _scheduler = scheduler or AppointmentScheduler()
        return _scheduler
