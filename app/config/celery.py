"""
Celery application.

Broker and result backend both come from CELERY_* settings (Redis by
default). Tasks are discovered from each app's tasks.py; the settlement
reconciliation schedule is stored by django-celery-beat and seeded by
payments/migrations/0002_settlement_reconcile_schedule.py.

    celery -A config worker -l info
    celery -A config beat -l info
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("events_payments")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
