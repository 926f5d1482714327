"""Development settings for the Method & Passion booking admin.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and keeping
uploaded gallery images on the local filesystem. Do not use these settings
in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Gallery images stay on disk unless an S3 endpoint is configured
if not S3_ENDPOINT_URL:  # noqa: F405
    STORAGES['images'] = {  # noqa: F405
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
        'OPTIONS': {'location': MEDIA_ROOT / 'images'},  # noqa: F405
    }
