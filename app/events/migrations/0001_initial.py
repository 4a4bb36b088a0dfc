import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
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
                ("title", models.CharField(max_length=200)),
                (
                    "slug",
                    models.SlugField(
                        editable=False,
                        help_text="Set once on creation from the title and creator id",
                        max_length=220,
                        unique=True,
                    ),
                ),
                ("image_url", models.URLField(blank=True)),
                ("host_name", models.CharField(max_length=200)),
                ("host_email", models.EmailField(max_length=254)),
                ("host_photo", models.URLField(blank=True)),
                ("is_private", models.BooleanField(default=True)),
                (
                    "chip_in_type",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("fixed", "Fixed amount"),
                            ("target", "Target amount"),
                            ("donation", "Free donation (minimum)"),
                        ],
                        help_text="Blank when the event does not accept chip-ins",
                        max_length=20,
                    ),
                ),
                (
                    "fixed_amount",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                (
                    "target_amount",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                (
                    "min_amount",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
                ),
                ("bank_account_name", models.CharField(blank=True, max_length=200)),
                ("bank_account_number", models.CharField(blank=True, max_length=20)),
                ("bank_name", models.CharField(blank=True, max_length=100)),
                ("bank_code", models.CharField(blank=True, max_length=20)),
                (
                    "recipient_code",
                    models.CharField(
                        blank=True,
                        help_text="Paystack transfer recipient code (RCP_xxx)",
                        max_length=64,
                    ),
                ),
                (
                    "creator",
                    models.ForeignKey(
                        help_text="User who created the event",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
