from django.apps import AppConfig
from django.conf import settings


class AppointmentsConfig(AppConfig):
    name = 'appointments'
    verbose_name = 'Appointments'

    def ready(self):
        if settings.APPOINTMENTS.get('SEED_SAMPLE_DATA'):
            from .sample_data import seed_sample_appointments
            from .services import get_scheduler

            seed_sample_appointments(get_scheduler())
