"""Top-level package for Django configuration.

Holds the settings modules for each environment, the URL configuration
and the WSGI, ASGI and Celery entry points of the SpaceBook service.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
