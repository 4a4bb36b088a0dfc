"""
Project configuration: settings, URLs, WSGI entry point and the Celery app.

The Celery app is imported here so that `celery -A config` and Django
share one configured instance and shared_task binds to it.
"""

from config.celery import app as celery_app

__all__ = ("celery_app",)
