import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterator, Optional

from .utils.time_utils import to_iso


# No ORM here: appointments live in an in-memory AppointmentBook.
@dataclass
class Appointment:
	STATUS_PENDING   = "pending"
	STATUS_CONFIRMED = "confirmed"
	STATUS_CANCELLED = "cancelled"

	STATUS_CHOICES = [
		(STATUS_PENDING, "Pending"),
		(STATUS_CONFIRMED, "Confirmed"),
		(STATUS_CANCELLED, "Cancelled"),
	]

	id: str
	title: str
	start: datetime
	end: datetime
	# the schedulable resource; conflicts and availability are per counselor
	counselor_id: str
	client_name: str
	client_email: str
	status: str = STATUS_PENDING
	type: str = ""
	notes: str = ""
	created_at: Optional[datetime] = None
	updated_at: Optional[datetime] = None

	@property
	def is_active(self) -> bool:
		return self.status != self.STATUS_CANCELLED

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"title": self.title,
			"start": to_iso(self.start),
			"end": to_iso(self.end),
			"counselorId": self.counselor_id,
			"clientName": self.client_name,
			"clientEmail": self.client_email,
			"status": self.status,
			"type": self.type,
			"notes": self.notes,
			"createdAt": to_iso(self.created_at),
			"updatedAt": to_iso(self.updated_at),
		}

	def __str__(self):
		return f"{self.title} - {self.counselor_id} {to_iso(self.start)}"


STATUS_VALUES = tuple(value for value, _ in Appointment.STATUS_CHOICES)

# Fields a caller may set on create/update; id and timestamps belong to the scheduler.
EDITABLE_FIELDS = (
	"title",
	"start",
	"end",
	"counselor_id",
	"client_name",
	"client_email",
	"status",
	"type",
	"notes",
)


class AppointmentBook:
	"""
	The collection of stored appointments plus the id counter.
	Ids are handed out once and never reused, even after a record is removed.
	"""

	def __init__(self):
		self._records: Dict[str, Appointment] = {}
		self._ids = itertools.count(1)

	def next_id(self) -> str:
		return str(next(self._ids))

	def get(self, appointment_id) -> Optional[Appointment]:
		return self._records.get(str(appointment_id))

	def put(self, appointment: Appointment) -> None:
		self._records[appointment.id] = appointment

	def remove(self, appointment_id) -> Optional[Appointment]:
		return self._records.pop(str(appointment_id), None)

	def clear(self) -> None:
		self._records.clear()

	def __iter__(self) -> Iterator[Appointment]:
		return iter(list(self._records.values()))

	def __len__(self):
		return len(self._records)

	def __contains__(self, appointment_id):
		return str(appointment_id) in self._records
