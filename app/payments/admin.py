"""
Payment admin configuration.

Registers donations, job checkpoints and settlement runs with the Django
admin. Status fields are read-only: donations change state only through
DonationLifecycleService and settlement reconciliation.
"""

from django.contrib import admin

from payments.models import Donation, JobCheckpoint, SettlementRun

__all__ = [
    "DonationAdmin",
    "JobCheckpointAdmin",
    "SettlementRunAdmin",
]


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Donation.

    Provides visibility into chip-ins and their payout eligibility.
    """

    list_display = [
        "payment_reference",
        "event",
        "user",
        "amount",
        "fee",
        "status",
        "payout_status",
        "is_payout_eligible",
        "settled_at",
        "created_at",
    ]
    list_filter = ["status", "payout_status", "is_payout_eligible", "created_at"]
    search_fields = ["id", "payment_reference", "user__email", "event__title"]
    readonly_fields = [
        "id",
        "event",
        "user",
        "amount",
        "currency",
        "fee",
        "status",
        "is_payout_eligible",
        "settled_at",
        "payment_reference",
        "metadata",
        "created_at",
        "updated_at",
    ]
    list_select_related = ["event", "user"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "payment_reference", "event", "user"),
            },
        ),
        (
            "Amount",
            {
                "fields": ("amount", "currency", "fee"),
            },
        ),
        (
            "Status",
            {
                "fields": ("status", "payout_status", "is_payout_eligible", "settled_at"),
            },
        ),
        (
            "Gateway",
            {
                "fields": ("metadata",),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_add_permission(self, request) -> bool:
        """Donations are created by the chip-in flow only."""
        return False

    def has_delete_permission(self, request, obj=None) -> bool:
        """Donations are never deleted."""
        return False


@admin.register(JobCheckpoint)
class JobCheckpointAdmin(admin.ModelAdmin):
    """
    Admin configuration for JobCheckpoint.

    last_run_at can be moved back by hand to make the next reconciliation
    run re-scan an older window.
    """

    list_display = ["name", "last_run_at", "updated_at"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["name"]


@admin.register(SettlementRun)
class SettlementRunAdmin(admin.ModelAdmin):
    """
    Admin configuration for SettlementRun.

    Runs are created by the reconciliation service and should not be
    manually modified.
    """

    list_display = [
        "id",
        "job_name",
        "started_at",
        "status",
        "duration_display",
        "settlements_scanned",
        "transactions_scanned",
        "donations_reconciled",
    ]
    list_filter = ["status", "job_name", "started_at"]
    search_fields = ["id", "job_name"]
    readonly_fields = [
        "id",
        "job_name",
        "window_from",
        "started_at",
        "completed_at",
        "duration_display",
        "settlements_scanned",
        "transactions_scanned",
        "donations_reconciled",
        "status",
        "error_message",
        "created_at",
        "updated_at",
    ]
    date_hierarchy = "started_at"
    ordering = ["-started_at"]

    fieldsets = (
        (
            None,
            {
                "fields": ("id", "job_name", "status", "duration_display"),
            },
        ),
        (
            "Results Summary",
            {
                "fields": (
                    "window_from",
                    "settlements_scanned",
                    "transactions_scanned",
                    "donations_reconciled",
                ),
            },
        ),
        (
            "Timing",
            {
                "fields": ("started_at", "completed_at"),
            },
        ),
        (
            "Error Info",
            {
                "fields": ("error_message",),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(description="Duration")
    def duration_display(self, obj: SettlementRun) -> str:
        """Display the run duration in human-readable format."""
        if obj.duration_seconds is not None:
            return f"{obj.duration_seconds:.1f}s"
        return "Running..."

    def has_delete_permission(self, request, obj=None) -> bool:
        """Disable delete for settlement runs (audit trail)."""
        return False

    def has_add_permission(self, request) -> bool:
        """Disable adding settlement runs through admin."""
        return False
