"""
Events app configuration.

Holds the event data the payments app depends on: privacy, chip-in
rules, host identity and the host's payout bank account.
"""

from django.apps import AppConfig


class EventsConfig(AppConfig):
    """Configuration for the events application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "events"
    verbose_name = "Events"
