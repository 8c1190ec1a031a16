# marriage_registry/celery.py
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "marriage_registry.settings")

app = Celery("marriage_registry")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
