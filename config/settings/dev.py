"""Development settings for the pod-hotel booking service.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and sweeping
expired holds inline on reads so no Celery worker is required locally.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Without a beat worker, reclaim expired hold rows on availability reads
HOLDS_SWEEP_ON_READ = True

LOGGING["loggers"]["apps"]["level"] = "DEBUG"  # noqa: F405
