"""
Event admin configuration.
"""

from django.contrib import admin

from events.models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """
    Admin configuration for Event.

    The payout account fields are filled in through the payout-account
    endpoint so that a Paystack recipient code always matches them.
    """

    list_display = ["title", "slug", "creator", "is_private", "chip_in_type", "created_at"]
    list_filter = ["is_private", "chip_in_type"]
    search_fields = ["title", "slug", "host_email", "creator__email"]
    readonly_fields = [
        "id",
        "slug",
        "bank_account_name",
        "bank_account_number",
        "bank_name",
        "bank_code",
        "recipient_code",
        "created_at",
        "updated_at",
    ]
    ordering = ["-created_at"]

    fieldsets = (
        (None, {"fields": ("id", "title", "slug", "creator", "image_url")}),
        ("Host", {"fields": ("host_name", "host_email", "host_photo")}),
        (
            "Chip-in",
            {
                "fields": (
                    "is_private",
                    "chip_in_type",
                    "fixed_amount",
                    "target_amount",
                    "min_amount",
                ),
            },
        ),
        (
            "Payout Account",
            {
                "fields": (
                    "bank_account_name",
                    "bank_account_number",
                    "bank_name",
                    "bank_code",
                    "recipient_code",
                ),
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )
