"""
Django settings for the supply / store tracker backend.

Everything environment specific is read from os.environ so the same module
serves local development, tests and deployments.
"""
import os
from pathlib import Path


def env_bool(name, default=False):
    """Read a boolean flag from the environment ('1', 'true', 'yes', 'on')"""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-supply-tracker-dev-key')

DEBUG = env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')
    if host.strip()
]


# Application definition

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'backend.core',
    'backend.supplies',
    'backend.stores',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'backend.config.urls'

WSGI_APPLICATION = 'backend.config.wsgi.application'

# Records live in the tracker repositories, not in the ORM. Django still wants
# a default connection for contrib apps; nothing is ever migrated into it.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# REST framework: the trackers are single-user prototypes, no authentication
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}


# Tracker configuration

# Repository implementation per bounded context (dotted path to a class)
TRACKER_REPOSITORIES = {
    'supplies': 'backend.supplies.repository.InMemorySupplyRepository',
    'stores': 'backend.stores.repository.InMemoryStoreRepository',
}

# Start the store tracker with the three demo stores
TRACKER_SEED_DEMO_DATA = env_bool('TRACKER_SEED_DEMO_DATA', False)

# When False, updating or adjusting an unknown supply is silently ignored
TRACKER_STRICT_MISSING_IDS = env_bool('TRACKER_STRICT_MISSING_IDS', True)

# Sort mode used by the supply list when the request does not ask for one
TRACKER_DEFAULT_SORT = os.environ.get('TRACKER_DEFAULT_SORT', 'name')

# Seconds a client should keep import status messages on screen
TRACKER_STATUS_MESSAGE_TTL = int(os.environ.get('TRACKER_STATUS_MESSAGE_TTL', '3'))


# Logging

LOG_LEVEL = os.environ.get('DJANGO_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
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
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
        'backend.core': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'backend.supplies': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'backend.stores': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
