"""
Tests for payment models.

Tests cover:
- Donation fee set once on insert
- Conditional completion and failure updates
- Payout eligibility filter and bulk update
- Database constraints
- Refund window and FSM transitions
- JobCheckpoint monotonic upsert
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.db import IntegrityError
from django.utils import timezone
from django_fsm import TransitionNotAllowed
from freezegun import freeze_time

from payments.models import Donation, JobCheckpoint, SettlementRun
from payments.state_machines import DonationStatus, PayoutStatus
from payments.tests.factories import CompletedDonationFactory, DonationFactory


# =============================================================================
# Donation Creation Tests
# =============================================================================


class TestDonationCreation:
    """Tests for Donation creation."""

    def test_fee_computed_on_insert(self, db):
        """Should compute the fee from the amount when the row is created."""
        donation = DonationFactory(amount=Decimal("5000"))

        assert donation.fee == Decimal("150.00")
        assert donation.status == DonationStatus.PENDING
        assert donation.payout_status == PayoutStatus.PENDING
        assert donation.is_payout_eligible is False

    def test_fee_not_recomputed_on_save(self, db, settings):
        """Should keep the original fee when settings change later."""
        donation = DonationFactory(amount=Decimal("5000"))
        settings.CHIPIN_FIXED_FEE = Decimal("500")

        donation.amount = Decimal("6000")
        donation.save()
        donation.refresh_from_db()

        assert donation.fee == Decimal("150.00")

    def test_expected_amount_minor(self, db):
        """Should be (amount + fee) in kobo."""
        donation = DonationFactory(amount=Decimal("5000"))

        assert donation.expected_amount_minor == 515000

    def test_payment_reference_unique(self, db):
        """Should reject a second donation with the same reference."""
        DonationFactory(payment_reference="CHIP-IN_1000_abc")

        with pytest.raises(IntegrityError):
            DonationFactory(payment_reference="CHIP-IN_1000_abc")

    def test_payment_reference_optional(self, db):
        """Should allow several donations without a reference."""
        DonationFactory(payment_reference=None)
        DonationFactory(payment_reference=None)

        assert Donation.objects.filter(payment_reference__isnull=True).count() == 2


class TestDonationConstraints:
    """Tests for database check constraints."""

    def test_amount_must_be_positive(self, db):
        """Should reject a zero amount at the database."""
        donation = DonationFactory()

        with pytest.raises(IntegrityError):
            Donation.objects.filter(pk=donation.pk).update(amount=Decimal("0"))

    def test_payout_eligible_requires_completed(self, db):
        """Should reject payout eligibility on a pending donation."""
        donation = DonationFactory()

        with pytest.raises(IntegrityError):
            Donation.objects.filter(pk=donation.pk).update(is_payout_eligible=True)


# =============================================================================
# Conditional Update Tests
# =============================================================================


class TestCompletePending:
    """Tests for DonationQuerySet.complete_pending()."""

    def test_completes_pending_donation(self, db):
        """Should update one row and store the metadata."""
        donation = DonationFactory(payment_reference="CHIP-IN_1000_abc")
        metadata = {"transactionId": "CHIP-IN_1000_abc", "gateway": "paystack"}

        updated = Donation.objects.complete_pending("CHIP-IN_1000_abc", metadata)

        donation.refresh_from_db()
        assert updated == 1
        assert donation.status == DonationStatus.COMPLETED
        assert donation.metadata == metadata

    def test_second_call_changes_nothing(self, db):
        """Should affect zero rows once the donation left PENDING."""
        donation = DonationFactory(payment_reference="CHIP-IN_1000_abc")
        Donation.objects.complete_pending("CHIP-IN_1000_abc", {"gatewayResponse": "first"})

        updated = Donation.objects.complete_pending(
            "CHIP-IN_1000_abc", {"gatewayResponse": "second"}
        )

        donation.refresh_from_db()
        assert updated == 0
        assert donation.metadata == {"gatewayResponse": "first"}

    def test_unknown_reference(self, db):
        """Should affect zero rows for an unknown reference."""
        assert Donation.objects.complete_pending("missing", {}) == 0


class TestFailPending:
    """Tests for DonationQuerySet.fail_pending()."""

    def test_fails_pending_donation(self, db):
        """Should move a pending donation to FAILED."""
        donation = DonationFactory(payment_reference="CHIP-IN_1000_abc")

        updated = Donation.objects.fail_pending("CHIP-IN_1000_abc", {"gatewayResponse": "Declined"})

        donation.refresh_from_db()
        assert updated == 1
        assert donation.status == DonationStatus.FAILED

    def test_does_not_fail_completed_donation(self, db):
        """Should leave a completed donation alone."""
        donation = CompletedDonationFactory()

        updated = Donation.objects.fail_pending(donation.payment_reference, {})

        donation.refresh_from_db()
        assert updated == 0
        assert donation.status == DonationStatus.COMPLETED


class TestMarkPayoutEligible:
    """Tests for payout_candidates() and mark_payout_eligible()."""

    def test_marks_completed_paystack_donations(self, db):
        """Should flag completed donations and stamp settled_at."""
        donation = CompletedDonationFactory()
        settled_at = timezone.now()

        count = Donation.objects.mark_payout_eligible(
            [donation.payment_reference], settled_at=settled_at
        )

        donation.refresh_from_db()
        assert count == 1
        assert donation.is_payout_eligible is True
        assert donation.settled_at == settled_at

    def test_skips_pending_donations(self, db):
        """Should never touch a donation that is not completed."""
        donation = DonationFactory()

        count = Donation.objects.mark_payout_eligible(
            [donation.payment_reference], settled_at=timezone.now()
        )

        donation.refresh_from_db()
        assert count == 0
        assert donation.is_payout_eligible is False

    def test_skips_already_eligible(self, db):
        """Should not re-stamp a donation that is already payout-eligible."""
        donation = CompletedDonationFactory()
        first = timezone.now() - timedelta(hours=1)
        Donation.objects.mark_payout_eligible([donation.payment_reference], settled_at=first)

        count = Donation.objects.mark_payout_eligible(
            [donation.payment_reference], settled_at=timezone.now()
        )

        donation.refresh_from_db()
        assert count == 0
        assert donation.settled_at == first

    def test_skips_other_gateways(self, db):
        """Should only match donations completed through the given gateway."""
        donation = CompletedDonationFactory(metadata={"gateway": "manual"})

        count = Donation.objects.mark_payout_eligible(
            [donation.payment_reference], settled_at=timezone.now()
        )

        assert count == 0

    def test_skips_paid_out_donations(self, db):
        """Should ignore donations whose payout already moved on."""
        donation = CompletedDonationFactory(payout_status=PayoutStatus.PAID)

        count = Donation.objects.mark_payout_eligible(
            [donation.payment_reference], settled_at=timezone.now()
        )

        assert count == 0

    def test_only_matching_references(self, db):
        """Should leave donations outside the reference list untouched."""
        included = CompletedDonationFactory()
        excluded = CompletedDonationFactory()

        count = Donation.objects.mark_payout_eligible(
            [included.payment_reference, "CHIP-IN_unknown"], settled_at=timezone.now()
        )

        excluded.refresh_from_db()
        assert count == 1
        assert excluded.is_payout_eligible is False


class TestTotalsForEvent:
    """Tests for DonationQuerySet.totals_for_event()."""

    def test_sums_completed_donations_only(self, db, event):
        """Should count and sum only completed donations."""
        CompletedDonationFactory(event=event, amount=Decimal("5000"))
        CompletedDonationFactory(event=event, amount=Decimal("2500"))
        DonationFactory(event=event, amount=Decimal("9999"))

        totals = Donation.objects.totals_for_event(event)

        assert totals == {"total_amount": Decimal("7500.00"), "total_donations": 2}

    def test_empty_event(self, db, event):
        """Should return zero totals when nothing was donated."""
        totals = Donation.objects.totals_for_event(event)

        assert totals == {"total_amount": Decimal("0"), "total_donations": 0}


# =============================================================================
# Refund Tests
# =============================================================================


class TestDonationRefund:
    """Tests for the refund window and FSM transitions."""

    def test_refundable_within_window(self, db):
        """Should be refundable when completed in the last 30 days."""
        donation = CompletedDonationFactory()

        assert donation.is_refundable is True

    def test_not_refundable_after_window(self, db):
        """Should not be refundable 31 days after creation."""
        with freeze_time(timezone.now() - timedelta(days=31)):
            donation = CompletedDonationFactory()

        assert donation.is_refundable is False
        with pytest.raises(TransitionNotAllowed):
            donation.refund()

    def test_pending_not_refundable(self, db):
        """Should not be refundable before completion."""
        donation = DonationFactory()

        assert donation.is_refundable is False

    def test_refund_transition(self, db):
        """Should move a refundable donation to REFUNDED."""
        donation = CompletedDonationFactory()

        donation.refund()
        donation.save()
        donation.refresh_from_db()

        assert donation.status == DonationStatus.REFUNDED


# =============================================================================
# JobCheckpoint Tests
# =============================================================================


class TestJobCheckpoint:
    """Tests for JobCheckpoint manager."""

    def test_get_last_run_without_checkpoint(self, db):
        """Should return None for a job that never completed."""
        assert JobCheckpoint.objects.get_last_run("never_ran") is None

    def test_record_run_creates_checkpoint(self, db):
        """Should upsert the checkpoint on first run."""
        run_at = timezone.now()

        JobCheckpoint.objects.record_run("job", run_at)

        assert JobCheckpoint.objects.get_last_run("job") == run_at

    def test_record_run_moves_forward(self, db):
        """Should advance to a later run time."""
        earlier = timezone.now() - timedelta(hours=1)
        later = timezone.now()
        JobCheckpoint.objects.record_run("job", earlier)

        JobCheckpoint.objects.record_run("job", later)

        assert JobCheckpoint.objects.get_last_run("job") == later
        assert JobCheckpoint.objects.filter(name="job").count() == 1

    def test_record_run_never_moves_backwards(self, db):
        """Should keep the later checkpoint when an earlier run is recorded."""
        earlier = timezone.now() - timedelta(hours=1)
        later = timezone.now()
        JobCheckpoint.objects.record_run("job", later)

        checkpoint = JobCheckpoint.objects.record_run("job", earlier)

        assert checkpoint.last_run_at == later


class TestSettlementRun:
    """Tests for SettlementRun."""

    def test_duration_seconds(self, db):
        """Should report the run duration once completed."""
        started = timezone.now()
        run = SettlementRun.objects.create(
            job_name="job",
            window_from=started - timedelta(days=1),
            started_at=started,
            completed_at=started + timedelta(seconds=90),
        )

        assert run.duration_seconds == 90.0

    def test_duration_while_running(self, db):
        """Should be None while the run is in progress."""
        now = timezone.now()
        run = SettlementRun.objects.create(job_name="job", window_from=now, started_at=now)

        assert run.duration_seconds is None
