import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from .exceptions import AppointmentConflict, AppointmentNotFound, AppointmentValidationError
from .forms import AppointmentFilterForm, AvailabilityForm, appointment_data, form_errors
from .services import get_scheduler
from .utils.time_utils import to_iso

logger = logging.getLogger(__name__)


def _ok(data, status=200, **extra):
    return JsonResponse({"success": True, **extra, "data": data}, status=status)


def _fail(message, status, **extra):
    return JsonResponse({"success": False, "message": message, **extra}, status=status)


def _read_json(request):
    try:
        return json.loads(request.body or b"{}")
    except (UnicodeDecodeError, ValueError):
        raise AppointmentValidationError(["Request body must be valid JSON"])


def api_errors(failure_message):
    """
    Map scheduler exceptions onto the JSON error envelope.
    Anything unexpected is logged and reported as a 500 with failure_message.
    """
    def decorator(view):
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                return view(request, *args, **kwargs)
            except AppointmentNotFound:
                return _fail("Appointment not found", 404)
            except AppointmentValidationError as e:
                return _fail("Validation failed", 400, errors=e.messages)
            except AppointmentConflict as e:
                return _fail(
                    "Appointment conflict detected", 409,
                    error=str(e), conflicts=e.conflict_ids,
                )
            except Exception as e:
                logger.exception("%s %s failed", request.method, request.path)
                return _fail(failure_message, 500, error=str(e))
        return wrapper
    return decorator


@csrf_exempt
@require_http_methods(["GET", "POST"])
def appointment_collection(request):
    if request.method == "POST":
        return create_appointment(request)
    return list_appointments(request)


@csrf_exempt
@require_http_methods(["GET", "PUT", "DELETE"])
def appointment_detail(request, appointment_id):
    if request.method == "PUT":
        return update_appointment(request, appointment_id)
    if request.method == "DELETE":
        return cancel_appointment(request, appointment_id)
    return get_appointment(request, appointment_id)


@api_errors("Failed to fetch appointments")
def list_appointments(request):
    form = AppointmentFilterForm(request.GET)
    if not form.is_valid():
        raise AppointmentValidationError(form_errors(form))

    appointments = get_scheduler().list(**form.filters())
    return _ok([appt.to_dict() for appt in appointments], total=len(appointments))


@api_errors("Failed to fetch appointment")
def get_appointment(request, appointment_id):
    return _ok(get_scheduler().get(appointment_id).to_dict())


@api_errors("Failed to create appointment")
def create_appointment(request):
    data = appointment_data(_read_json(request))
    appointment = get_scheduler().create(data)
    return _ok(appointment.to_dict(), status=201, message="Appointment created successfully")


@api_errors("Failed to update appointment")
def update_appointment(request, appointment_id):
    scheduler = get_scheduler()
    # 404 before looking at the body
    scheduler.get(appointment_id)
    patch = appointment_data(_read_json(request))
    appointment = scheduler.update(appointment_id, patch)
    return _ok(appointment.to_dict(), message="Appointment updated successfully")


@api_errors("Failed to cancel appointment")
def cancel_appointment(request, appointment_id):
    appointment = get_scheduler().cancel(appointment_id)
    return _ok(appointment.to_dict(), message="Appointment cancelled successfully")


@require_GET
@api_errors("Failed to check availability")
def availability(request, counselor_id):
    form = AvailabilityForm(request.GET)
    if not form.is_valid():
        errors = form_errors(form)
        return _fail(errors[0], 400, errors=errors)

    result = get_scheduler().list_availability(counselor_id, form.cleaned_data["date"])
    slots = [{"start": to_iso(slot["start"]), "end": to_iso(slot["end"])} for slot in result["slots"]]

    data = {
        "available": result["available"],
        "slots": slots,
        "totalSlots": len(slots),
    }
    if result["reason"] and not result["available"]:
        data["reason"] = result["reason"]
    return _ok(data)
