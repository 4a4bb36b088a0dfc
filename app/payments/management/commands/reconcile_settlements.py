"""
Run settlement reconciliation from the command line.

    python manage.py reconcile_settlements
    python manage.py reconcile_settlements --lookback-days 7
"""

from django.core.management.base import BaseCommand, CommandError

from payments.exceptions import ReconciliationError
from payments.services import DEFAULT_JOB_NAME, SettlementReconciliationService


class Command(BaseCommand):
    help = "Mark donations included in successful Paystack settlements as payout-eligible"

    def add_arguments(self, parser):
        parser.add_argument(
            "--lookback-days",
            type=int,
            default=None,
            help="Window to scan when the job has no checkpoint yet",
        )
        parser.add_argument(
            "--job-name",
            default=DEFAULT_JOB_NAME,
            help="Checkpoint name (default: %(default)s)",
        )

    def handle(self, *args, **options):
        job_name = options["job_name"]
        self.stdout.write(f"Reconciling settlements for {job_name}...")

        try:
            result = SettlementReconciliationService.run(
                job_name=job_name,
                lookback_days=options["lookback_days"],
            )
        except ReconciliationError as e:
            raise CommandError(e.message) from e

        self.stdout.write(f"Window from: {result.window_from.isoformat()}")
        self.stdout.write(f"Settlements scanned: {result.settlements_scanned}")
        self.stdout.write(f"Transactions scanned: {result.transactions_scanned}")
        self.stdout.write(
            self.style.SUCCESS(f"Donations reconciled: {result.total_reconciled}")
        )
