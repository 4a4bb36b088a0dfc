import uuid

import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("events", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="JobCheckpoint",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True)),
                ("last_run_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="SettlementRun",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("job_name", models.CharField(db_index=True, max_length=100)),
                (
                    "window_from",
                    models.DateTimeField(help_text="Settlements created since this time were scanned"),
                ),
                ("started_at", models.DateTimeField()),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("settlements_scanned", models.PositiveIntegerField(default=0)),
                ("transactions_scanned", models.PositiveIntegerField(default=0)),
                ("donations_reconciled", models.PositiveIntegerField(default=0)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("running", "Running"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="running",
                        max_length=20,
                    ),
                ),
                ("error_message", models.TextField(blank=True)),
            ],
            options={
                "ordering": ["-started_at"],
                "indexes": [
                    models.Index(fields=["job_name", "started_at"], name="settlement_run_job_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Donation",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Chip-in amount in major currency units",
                        max_digits=12,
                    ),
                ),
                (
                    "currency",
                    models.CharField(choices=[("NGN", "Nigerian Naira")], default="NGN", max_length=3),
                ),
                (
                    "fee",
                    models.DecimalField(
                        decimal_places=2,
                        editable=False,
                        help_text="Transaction fee, computed once at creation",
                        max_digits=12,
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("refunded", "Refunded"),
                            ("failed", "Failed"),
                        ],
                        db_index=True,
                        default="pending",
                        help_text="Current state of the donation (managed by FSM)",
                        max_length=50,
                    ),
                ),
                (
                    "payout_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("paid", "Paid"), ("failed", "Failed")],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("is_payout_eligible", models.BooleanField(default=False)),
                (
                    "settled_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When a Paystack settlement including this donation was reconciled",
                        null=True,
                    ),
                ),
                (
                    "payment_reference",
                    models.CharField(
                        blank=True,
                        help_text="Paystack transaction reference (CHIP-IN_<ms>_<hex>)",
                        max_length=100,
                        null=True,
                        unique=True,
                    ),
                ),
                (
                    "metadata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="transactionId, gateway and gatewayResponse from completion",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        help_text="Event this donation chips in to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="donations",
                        to="events.event",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who made the donation",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="donations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["event", "user"], name="donation_event_user_idx"),
                    models.Index(fields=["payout_status", "status"], name="donation_payout_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="donation_amount_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("fee__gte", 0)),
                        name="donation_fee_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            ("is_payout_eligible", False),
                            ("status__in", ["completed", "refunded"]),
                            _connector="OR",
                        ),
                        name="donation_payout_eligible_requires_completed",
                    ),
                ],
            },
        ),
    ]
