"""
Add celery-beat schedule for Paystack settlement reconciliation.

Runs the reconciliation task hourly. Beat runs a single scheduler, so
runs never overlap within an invocation window.
"""

from django.db import migrations

TASK_NAME = "Reconcile Paystack Settlements"


def create_periodic_task(apps, schema_editor):
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="hours",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "payments.workers.settlement_worker.run_settlement_reconciliation",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Walks Paystack settlements since the last checkpoint and marks "
                "matching completed donations payout-eligible."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("payments", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
