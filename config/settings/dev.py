"""Development settings.

Extends the base settings with debug enabled, all hosts allowed, the
console email backend and verbose booking logs. Do not use these settings
in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['loggers']['apps']['level'] = os.environ.get('DJANGO_LOG_LEVEL', 'DEBUG')  # noqa: F405
