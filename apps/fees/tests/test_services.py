# fees/tests/test_services.py

from datetime import timedelta
from decimal import Decimal
from io import StringIO
from unittest import mock
import uuid

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase

from core.utils import get_center_today
from fees.exceptions import (
    DuplicateBillingRecord,
    InvalidAmount,
    InvalidBillingPeriod,
    RecordNotFound,
    UnknownReceipt,
)
from fees.models import BillingRecord, PaymentEntry
from fees.services import BillingService
from fees.utils import generate_receipt_number
from utils.tests.factories import make_config, make_student


class BillingServiceTests(TestCase):

    def setUp(self):
        self.config = make_config()
        self.student = make_student()
        self.record = BillingService.create_billing_record(
            self.student, '2026-01', Decimal('15000'), self.config
        )

    def payment(self, amount, **extra):
        data = {'amount': amount, 'payment_method': 'cash'}
        data.update(extra)
        return data

    def add(self, amount, **extra):
        return BillingService.add_payment(self.record.pk, self.payment(amount, **extra), self.config, 'bursar')

    # -------------------------------------------------------------------------
    # RECORD CREATION
    # -------------------------------------------------------------------------

    def test_new_record_is_pending(self):
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PENDING)
        self.assertEqual(self.record.amount_paid, Decimal('0'))
        self.assertEqual(self.record.balance, Decimal('15000'))
        self.assertEqual(self.record.class_level, 'Form 1')
        self.assertEqual(self.record.currency, 'FCFA')

    def test_duplicate_record_rejected(self):
        with self.assertRaises(DuplicateBillingRecord):
            BillingService.create_billing_record(self.student, '2026-01', Decimal('15000'), self.config)

    def test_invalid_period_rejected(self):
        for period in ['2026-13', '2026-1', 'January', '', None]:
            with self.assertRaises(InvalidBillingPeriod):
                BillingService.create_billing_record(self.student, period, Decimal('100'), self.config)

    def test_negative_total_rejected(self):
        with self.assertRaises(InvalidAmount):
            BillingService.create_billing_record(self.student, '2026-02', Decimal('-1'), self.config)

    # -------------------------------------------------------------------------
    # ADD / REMOVE
    # -------------------------------------------------------------------------

    def test_partial_then_paid(self):
        entry = self.add('5000')
        self.assertEqual(entry.record.status, BillingRecord.STATUS_PARTIAL)
        self.assertEqual(entry.record.balance, Decimal('10000'))

        entry = self.add('10000')
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PAID)
        self.assertEqual(self.record.amount_paid, Decimal('15000'))
        self.assertEqual(self.record.balance, Decimal('0'))
        self.assertEqual(entry.sequence, 2)

    def test_overpayment_keeps_amount_paid(self):
        with self.assertLogs('edutrack.ledger', level='WARNING') as logs:
            self.add('20000')
        self.record.refresh_from_db()
        self.assertEqual(self.record.amount_paid, Decimal('20000'))
        self.assertEqual(self.record.balance, Decimal('0'))
        self.assertEqual(self.record.status, BillingRecord.STATUS_PAID)
        self.assertEqual(self.record.overpayment, Decimal('5000'))
        self.assertTrue(any('overpaid by 5000' in line for line in logs.output))

    def test_remove_last_entry_returns_to_pending(self):
        entry = self.add('15000')
        removed = BillingService.remove_payment(self.record.pk, entry.receipt_number)

        self.assertEqual(removed.record.status, BillingRecord.STATUS_PENDING)
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PENDING)
        self.assertEqual(self.record.amount_paid, Decimal('0'))
        self.assertEqual(self.record.balance, Decimal('15000'))
        self.assertFalse(PaymentEntry.objects.filter(pk=entry.pk).exists())

    def test_remove_moves_paid_to_partial(self):
        self.add('5000')
        second = self.add('10000')
        BillingService.remove_payment(self.record.pk, second.receipt_number)
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PARTIAL)
        self.assertEqual(self.record.balance, Decimal('10000'))

    def test_unknown_receipt(self):
        self.add('5000')
        with self.assertRaises(UnknownReceipt):
            BillingService.remove_payment(self.record.pk, 'TUT-1999-00001')
        self.record.refresh_from_db()
        self.assertEqual(self.record.amount_paid, Decimal('5000'))

    def test_receipt_of_other_record_is_unknown(self):
        other = BillingService.create_billing_record(self.student, '2026-02', Decimal('100'), self.config)
        foreign = BillingService.add_payment(other.pk, self.payment('50'), self.config, 'bursar')
        with self.assertRaises(UnknownReceipt):
            BillingService.remove_payment(self.record.pk, foreign.receipt_number)

    def test_record_not_found(self):
        with self.assertRaises(RecordNotFound):
            BillingService.add_payment(uuid.uuid4(), self.payment('100'), self.config, 'bursar')
        with self.assertRaises(RecordNotFound):
            BillingService.remove_payment('not-a-uuid', 'TUT-2026-00001')

    def test_invalid_amounts_rejected_before_saving(self):
        for amount in ['0', '-5', 'abc', '', None, '1.001', True]:
            with self.assertRaises(InvalidAmount):
                self.add(amount)
        self.assertEqual(PaymentEntry.objects.count(), 0)

    def test_future_payment_date_rejected(self):
        tomorrow = get_center_today() + timedelta(days=1)
        with self.assertRaises(ValidationError):
            self.add('100', payment_date=tomorrow.isoformat())

    def test_unknown_payment_method_rejected(self):
        with self.assertRaises(ValidationError):
            self.add('100', payment_method='cheque')

    def test_entries_cannot_be_modified(self):
        entry = self.add('100')
        entry.amount = Decimal('200')
        with self.assertRaises(ValidationError):
            entry.save()

    # -------------------------------------------------------------------------
    # RECORD PAYMENT (create on first payment)
    # -------------------------------------------------------------------------

    def test_record_payment_creates_record_with_default_total(self):
        record, entry = BillingService.record_payment(
            self.student, '2026-03', None, self.payment('5000'), self.config, 'bursar'
        )
        self.assertEqual(record.total_amount, Decimal('20000'))
        self.assertEqual(record.status, BillingRecord.STATUS_PARTIAL)
        self.assertEqual(entry.sequence, 1)

    def test_record_payment_reuses_existing_record(self):
        record, _ = BillingService.record_payment(
            self.student, '2026-01', Decimal('99999'), self.payment('15000'), self.config, 'bursar'
        )
        self.assertEqual(record.pk, self.record.pk)
        self.assertEqual(record.total_amount, Decimal('15000'))
        self.assertEqual(record.status, BillingRecord.STATUS_PAID)

    def test_record_payment_invalid_entry_creates_nothing(self):
        with self.assertRaises(InvalidAmount):
            BillingService.record_payment(
                self.student, '2026-04', Decimal('100'), self.payment('0'), self.config, 'bursar'
            )
        self.assertFalse(BillingRecord.objects.filter(billing_period='2026-04').exists())

    # -------------------------------------------------------------------------
    # TOTAL / DELETE
    # -------------------------------------------------------------------------

    def test_update_total_reclassifies(self):
        self.add('10000')
        record = BillingService.update_total_amount(self.record.pk, '10000')
        self.assertEqual(record.status, BillingRecord.STATUS_PAID)

        record = BillingService.update_total_amount(self.record.pk, '12000')
        self.assertEqual(record.status, BillingRecord.STATUS_PARTIAL)
        self.assertEqual(record.balance, Decimal('2000'))

    def test_delete_record_removes_entries(self):
        self.add('100')
        BillingService.delete_billing_record(self.record.pk)
        self.assertFalse(BillingRecord.objects.exists())
        self.assertFalse(PaymentEntry.objects.exists())


class ReceiptNumberTests(TestCase):

    def setUp(self):
        self.config = make_config(receipt_prefix='ABC')
        self.record = BillingService.create_billing_record(make_student(), '2026-01', Decimal('500'), self.config)

    def test_sequence_per_prefix_and_year(self):
        year = get_center_today().year
        first = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        second = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        self.assertEqual(first.receipt_number, f"ABC-{year}-00001")
        self.assertEqual(second.receipt_number, f"ABC-{year}-00002")

    def test_numbers_not_reused_after_removal_of_earlier_receipt(self):
        first = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        second = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        BillingService.remove_payment(self.record.pk, first.receipt_number)
        third = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        self.assertNotIn(third.receipt_number, {first.receipt_number, second.receipt_number})

    def test_other_prefix_starts_at_one(self):
        BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        on_date = get_center_today()
        self.assertEqual(
            generate_receipt_number(make_config(receipt_prefix='XYZ'), on_date),
            f"XYZ-{on_date.year}-00001"
        )

    def test_numbers_keep_growing_past_99999(self):
        year = get_center_today().year
        PaymentEntry.objects.create(
            record=self.record, receipt_number=f"ABC-{year}-99999",
            amount=Decimal('10'), payment_date=get_center_today(),
        )
        first = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        second = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        self.assertEqual(first.receipt_number, f"ABC-{year}-100000")
        self.assertEqual(second.receipt_number, f"ABC-{year}-100001")

    def test_taken_number_is_retried(self):
        taken = BillingService.add_payment(self.record.pk, {'amount': '10'}, self.config, 'x')
        year = get_center_today().year
        with mock.patch(
            'fees.services.generate_receipt_number',
            side_effect=[taken.receipt_number, f"ABC-{year}-00002"],
        ):
            entry = BillingService.add_payment(self.record.pk, {'amount': '15'}, self.config, 'x')
        self.assertEqual(entry.receipt_number, f"ABC-{year}-00002")
        self.record.refresh_from_db()
        self.assertEqual(self.record.amount_paid, Decimal('25'))


class SignalResyncTests(TestCase):
    """Changes made outside BillingService still keep records reconciled."""

    def setUp(self):
        self.config = make_config()
        self.record = BillingService.create_billing_record(make_student(), '2026-01', Decimal('1000'), self.config)

    def test_direct_entry_delete_resyncs_record(self):
        entry = BillingService.add_payment(self.record.pk, {'amount': '1000'}, self.config, 'x')
        PaymentEntry.objects.get(pk=entry.pk).delete()
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PENDING)
        self.assertEqual(self.record.balance, Decimal('1000'))

    def test_stale_derived_values_are_overwritten_on_save(self):
        BillingService.add_payment(self.record.pk, {'amount': '400'}, self.config, 'x')
        BillingRecord.objects.filter(pk=self.record.pk).update(
            amount_paid=Decimal('0'), balance=Decimal('1000'), status=BillingRecord.STATUS_PAID
        )
        record = BillingRecord.objects.get(pk=self.record.pk)
        record.notes = 'touched'
        record.save()
        record.refresh_from_db()
        self.assertEqual(record.amount_paid, Decimal('400'))
        self.assertEqual(record.status, BillingRecord.STATUS_PARTIAL)

    def test_status_change_is_logged(self):
        with self.assertLogs('edutrack.ledger', level='INFO') as logs:
            BillingService.add_payment(self.record.pk, {'amount': '500'}, self.config, 'x')
        self.assertTrue(any('pending -> partial' in line for line in logs.output))

    def test_deleting_record_skips_entry_resync(self):
        BillingService.add_payment(self.record.pk, {'amount': '300'}, self.config, 'x')
        with self.assertNoLogs('edutrack.ledger', level='INFO'):
            BillingRecord.objects.get(pk=self.record.pk).delete()
        self.assertFalse(PaymentEntry.objects.exists())


class ReconcileCommandTests(TestCase):

    def setUp(self):
        config = make_config()
        self.record = BillingService.create_billing_record(make_student(), '2026-01', Decimal('1000'), config)
        BillingService.add_payment(self.record.pk, {'amount': '1000'}, config, 'x')
        BillingRecord.objects.filter(pk=self.record.pk).update(
            amount_paid=Decimal('0'), balance=Decimal('1000'), status=BillingRecord.STATUS_PENDING
        )

    def test_dry_run_reports_without_saving(self):
        out = StringIO()
        call_command('reconcile_billing_records', '--dry-run', stdout=out)
        self.assertIn('1 drifted', out.getvalue())
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PENDING)

    def test_fixes_drifted_records(self):
        out = StringIO()
        call_command('reconcile_billing_records', stdout=out)
        self.assertIn('reconciled 1', out.getvalue())
        self.record.refresh_from_db()
        self.assertEqual(self.record.status, BillingRecord.STATUS_PAID)
        self.assertEqual(self.record.amount_paid, Decimal('1000'))

        out = StringIO()
        call_command('reconcile_billing_records', stdout=out)
        self.assertIn('none drifted', out.getvalue())
