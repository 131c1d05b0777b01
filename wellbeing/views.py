import time

from django.conf import settings
from django.http import JsonResponse
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_GET

# Process start, for the uptime reported by /health
STARTED_AT = time.monotonic()


@require_GET
def health(request):
    return JsonResponse({
        "status": "OK",
        "timestamp": timezone.now().isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": settings.ENVIRONMENT,
    })


@require_GET
def api_index(request):
    """
    Small discovery document listing the appointment endpoints.
    """
    base = reverse("appointments:list")
    return JsonResponse({
        "message": "Wellbeing Appointments API",
        "version": "1.0.0",
        "endpoints": {
            "health": reverse("health"),
            "appointments": base,
        },
        "appointments": {
            "list": f"GET {base}?resourceId=&date=YYYY-MM-DD&status=",
            "get": f"GET {base}{{id}}",
            "create": f"POST {base}",
            "update": f"PUT {base}{{id}}",
            "cancel": f"DELETE {base}{{id}}",
            "availability": f"GET {base}availability/{{resourceId}}?date=YYYY-MM-DD",
        },
    })
