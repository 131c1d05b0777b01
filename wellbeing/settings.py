from pathlib import Path
import os
from decouple import Csv, config
from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# Quick-start development settings - unsuitable for production
# See https://docs.djangoproject.com/en/5.2/howto/deployment/checklist/

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config('SECRET_KEY', default='django-insecure-wellbeing-dev-key')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = config('DEBUG', default=True, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='127.0.0.1,localhost', cast=Csv()) if not DEBUG else ['*']

ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')

# Application definition

INSTALLED_APPS = [
    'appointments',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'wellbeing.urls'

WSGI_APPLICATION = 'wellbeing.wsgi.application'

# No persistence layer: appointments live in the scheduler's in-memory book.
DATABASES = {}

# Internationalization
# https://docs.djangoproject.com/en/5.2/topics/i18n/

LANGUAGE_CODE = 'en-us'
# Every scheduling rule (weekday, business hours, calendar dates) is read in this zone
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

# Appointment scheduling
APPOINTMENTS = {
    'BUSINESS_HOURS_START': config('BUSINESS_HOURS_START', default=9, cast=int),
    'BUSINESS_HOURS_END': config('BUSINESS_HOURS_END', default=18, cast=int),
    'SLOT_MINUTES': config('SLOT_MINUTES', default=60, cast=int),
    # Monday is 0
    'CLOSED_WEEKDAYS': (5, 6),
    # Book the sample appointments at startup
    'SEED_SAMPLE_DATA': config('SEED_SAMPLE_DATA', default=False, cast=bool),
}

# Logging
LOG_LEVEL = config('LOG_LEVEL', default='INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
        'appointments': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'wellbeing': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

