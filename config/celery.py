import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("pod_hotel")

# Periodic tasks live in settings.CELERY_BEAT_SCHEDULE
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
