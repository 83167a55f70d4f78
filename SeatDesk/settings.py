"""
Django settings for SeatDesk.

Every deploy-specific value is read from the environment (or a .env file)
through python-decouple.
"""
from pathlib import Path

from decouple import Csv, config

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config('SECRET_KEY', default='seatdesk-dev-secret-key-change-me')
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'accounts',
    'events',
    'inventory',
    'bookings',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'SeatDesk.middleware.ValidateTokenMiddleware',
]

ROOT_URLCONF = 'SeatDesk.urls'
WSGI_APPLICATION = 'SeatDesk.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {'context_processors': []},
    },
]

# Database
DB_ENGINE = config('DB_ENGINE', default='django.db.backends.sqlite3')
if DB_ENGINE.endswith('sqlite3'):
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': config('DB_NAME', default=str(BASE_DIR / 'db.sqlite3')),
            # IMMEDIATE takes the write lock at BEGIN so concurrent writers queue on the timeout
            'OPTIONS': {'timeout': 20, 'transaction_mode': 'IMMEDIATE'},
            'TEST': {'NAME': str(BASE_DIR / 'test_db.sqlite3')},
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': DB_ENGINE,
            'NAME': config('DB_NAME', default='seatdesk'),
            'USER': config('DB_USER', default='seatdesk'),
            'PASSWORD': config('DB_PASSWORD', default=''),
            'HOST': config('DB_HOST', default='localhost'),
            'PORT': config('DB_PORT', default='5432'),
            'CONN_MAX_AGE': config('DB_CONN_MAX_AGE', default=60, cast=int),
        }
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Cache
REDIS_URL = config('REDIS_URL', default='')
if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {'CLIENT_CLASS': 'django_redis.client.DefaultClient'},
            'KEY_PREFIX': 'seatdesk',
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'seatdesk',
        }
    }
ENABLE_CACHING = config('ENABLE_CACHING', default=True, cast=bool)

REST_FRAMEWORK = {
    # Authentication is handled by ValidateTokenMiddleware
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [],
    'UNAUTHENTICATED_USER': None,
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = config('TIME_ZONE', default='UTC')
USE_I18N = False
USE_TZ = True

MEDIA_ROOT = config('MEDIA_ROOT', default=str(BASE_DIR / 'uploads'))
MEDIA_URL = '/uploads/'

# JWT
JWT_SECRET_KEY = config('JWT_SECRET_KEY', default=SECRET_KEY)
JWT_ACCESS_TOKEN_LIFETIME = config('JWT_ACCESS_TOKEN_LIFETIME', default=24, cast=int)

# Seat booking
SEAT_HOLD_MINUTES = config('SEAT_HOLD_MINUTES', default=10, cast=int)
CANCELLATION_CUTOFF_HOURS = config('CANCELLATION_CUTOFF_HOURS', default=2, cast=int)
FREE_RESERVATION_EXPIRY_HOURS = config('FREE_RESERVATION_EXPIRY_HOURS', default=2, cast=int)
PAID_RESERVATION_EXPIRY_HOURS = config('PAID_RESERVATION_EXPIRY_HOURS', default=24, cast=int)
DEFAULT_VENUE_CAPACITY = config('DEFAULT_VENUE_CAPACITY', default=1196, cast=int)
QR_ENCODER = config('QR_ENCODER', default='bookings.qr.encode_qr')
# Keep a PNG copy of each ticket QR under MEDIA_ROOT/qrcodes
SAVE_QR_FILES = config('SAVE_QR_FILES', default=False, cast=bool)

# Email
EMAIL_BACKEND = config('EMAIL_BACKEND', default='django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = config('EMAIL_HOST', default='localhost')
EMAIL_PORT = config('EMAIL_PORT', default=587, cast=int)
EMAIL_HOST_USER = config('EMAIL_USER', default='')
EMAIL_HOST_PASSWORD = config('EMAIL_PASS', default='')
EMAIL_USE_TLS = config('EMAIL_USE_TLS', default=True, cast=bool)
EMAIL_TIMEOUT = config('EMAIL_TIMEOUT', default=10, cast=int)
DEFAULT_FROM_EMAIL = config('EMAIL_FROM', default='SeatDesk Ticketing <noreply@seatdesk.local>')

# Logging
LOG_LEVEL = config('LOG_LEVEL', default='INFO')
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s [%(process)d:%(threadName)s] %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': LOG_LEVEL,
    },
    'loggers': {
        'django.db.backends': {
            'level': 'WARNING',
        },
    },
}
