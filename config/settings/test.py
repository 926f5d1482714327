"""Test settings.

Runs against a file-backed SQLite database in IMMEDIATE transaction mode, so
threads in a test get their own connections and serialise writers the way
production SQLite does. Gallery blobs stay in memory and Celery tasks run
eagerly.
"""

import os
import tempfile

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.path.join(tempfile.gettempdir(), 'method_passion.sqlite3'),
        'TEST': {
            'NAME': os.path.join(tempfile.gettempdir(), 'test_method_passion.sqlite3'),
        },
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': 20,
        },
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
    'images': {
        'BACKEND': 'django.core.files.storage.InMemoryStorage',
    },
}

IDENTITY = {
    **IDENTITY,  # noqa: F405
    'RESOLVER': 'apps.users.identity.OpaqueSessionResolver',
    'JWKS_URL': '',
    'ADMIN_SUBJECTS': [],
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
