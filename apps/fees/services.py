# fees/services.py

"""
Billing Operations

- PaymentLedger: the pure reconciliation rule (amount paid, balance, status)
- BillingService: creating billing records and adding / removing payment
  entries, each inside one transaction with the record row locked

BillingRecord.reconcile() runs PaymentLedger on every save of a record,
and the PaymentEntry signals re-save the parent record whenever an entry
is created or deleted (see fees/signals.py). Views never reconcile
directly.
"""

from dataclasses import dataclass
from decimal import Decimal
import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from fees.exceptions import (
    DuplicateBillingRecord,
    RecordNotFound,
    UnknownReceipt,
)
from fees.models import BillingRecord, PaymentEntry
from fees.utils import (
    generate_receipt_number,
    validate_billing_period,
    validate_payment_data,
    validate_total_amount,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

# First receipt of a year can race with a concurrent payment
RECEIPT_NUMBER_ATTEMPTS = 3


# =============================================================================
# PAYMENT LEDGER - PURE RECONCILIATION
# =============================================================================

@dataclass(frozen=True)
class LedgerSummary:
    amount_paid: Decimal
    balance: Decimal
    status: str
    overpayment: Decimal = ZERO


class PaymentLedger:
    """
    Derives the money state of a billing record from its entries.

    Rules, first match wins:
        amount_paid <= 0            -> pending, balance = total
        amount_paid >= total        -> paid,    balance = 0
        otherwise                   -> partial, balance = total - amount_paid

    Overpayment keeps the real amount_paid; the excess is reported as
    `overpayment` and the balance stays at 0.
    """

    @staticmethod
    def reconcile(total_amount, amounts):
        """
        Args:
            total_amount: amount owed for the period (Decimal, >= 0)
            amounts: iterable of entry amounts (Decimal, > 0)

        Returns:
            LedgerSummary

        Example:
            >>> PaymentLedger.reconcile(Decimal('20000'), [Decimal('5000'), Decimal('3000')])
            LedgerSummary(amount_paid=Decimal('8000.00'), balance=Decimal('12000.00'), status='partial', ...)
        """
        total_amount = Decimal(str(total_amount))
        amount_paid = sum((Decimal(str(amount)) for amount in amounts), ZERO)
        balance = total_amount - amount_paid

        if amount_paid <= 0:
            return LedgerSummary(amount_paid, balance, BillingRecord.STATUS_PENDING)

        if amount_paid >= total_amount:
            return LedgerSummary(
                amount_paid, ZERO, BillingRecord.STATUS_PAID,
                overpayment=amount_paid - total_amount
            )

        return LedgerSummary(amount_paid, balance, BillingRecord.STATUS_PARTIAL)


# =============================================================================
# BILLING SERVICE - RECORD AND ENTRY MUTATIONS
# =============================================================================

class BillingService:
    """
    Billing record lifecycle and payment entry mutations.
    Every mutation is atomic and locks the billing record row.
    """

    @staticmethod
    def get_record(record_id, for_update=False):
        """
        Fetch a billing record by id.

        Raises:
            RecordNotFound
        """
        queryset = BillingRecord.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=record_id)
        except (BillingRecord.DoesNotExist, ValidationError, ValueError):
            raise RecordNotFound(f"Billing record {record_id} not found")

    @staticmethod
    @transaction.atomic
    def create_billing_record(student, billing_period, total_amount, config, notes=''):
        """
        Bill a student for a period.

        Args:
            student (Student): Student being billed
            billing_period (str): 'YYYY-MM'
            total_amount: amount owed, >= 0
            config (CenterConfig): currency comes from here
            notes (str): optional

        Returns:
            BillingRecord (status pending)

        Raises:
            InvalidBillingPeriod, InvalidAmount, DuplicateBillingRecord
        """
        billing_period = validate_billing_period(billing_period)
        total_amount = validate_total_amount(total_amount)

        if BillingRecord.objects.filter(student=student, billing_period=billing_period).exists():
            raise DuplicateBillingRecord(
                f"{student.full_name} already has a billing record for {billing_period}"
            )

        record = BillingRecord.objects.create(
            student=student,
            billing_period=billing_period,
            class_level=student.class_level,
            total_amount=total_amount,
            currency=config.currency,
            notes=notes or '',
        )

        logger.info(
            f"Created billing record {record.pk} for {student.full_name} "
            f"({billing_period}): {config.format_money(total_amount)}"
        )
        return record

    @staticmethod
    @transaction.atomic
    def record_payment(student, billing_period, total_amount, payment_data, config, received_by):
        """
        Record a payment for a student and period, creating the billing
        record on the first payment.

        total_amount is only used when the record is created; when it is
        None the center's default payment amount applies. An existing
        record keeps its total.

        Returns:
            tuple: (BillingRecord, PaymentEntry)
        """
        billing_period = validate_billing_period(billing_period)
        # Validate before creating anything so a bad entry leaves no empty record
        validate_payment_data(payment_data)

        record = (
            BillingRecord.objects.select_for_update()
            .filter(student=student, billing_period=billing_period)
            .first()
        )
        if record is None:
            if total_amount is None or total_amount == '':
                total_amount = config.default_payment_amount
            record = BillingService.create_billing_record(
                student, billing_period, total_amount, config
            )

        entry = BillingService._append_entry(record, payment_data, config, received_by)
        return record, entry

    @staticmethod
    @transaction.atomic
    def add_payment(record_id, payment_data, config, received_by):
        """
        Append a payment entry to an existing billing record.

        Args:
            record_id: BillingRecord id
            payment_data (dict): amount, payment_method, payment_date, notes
            config (CenterConfig): receipt prefix comes from here
            received_by (str): staff identifier

        Returns:
            PaymentEntry (entry.record holds the reconciled record)

        Raises:
            RecordNotFound, InvalidAmount, ValidationError
        """
        record = BillingService.get_record(record_id, for_update=True)
        return BillingService._append_entry(record, payment_data, config, received_by)

    @staticmethod
    def _append_entry(record, payment_data, config, received_by):
        data = validate_payment_data(payment_data)

        # Saving the entry re-saves `record` through the post_save signal
        for attempt in range(1, RECEIPT_NUMBER_ATTEMPTS + 1):
            receipt_number = generate_receipt_number(config)
            try:
                with transaction.atomic():
                    entry = PaymentEntry.objects.create(
                        record=record,
                        receipt_number=receipt_number,
                        received_by=str(received_by or ''),
                        **data
                    )
                break
            except IntegrityError:
                if attempt == RECEIPT_NUMBER_ATTEMPTS:
                    raise
                logger.warning(
                    f"Receipt number {receipt_number} taken by a concurrent payment, "
                    f"retrying ({attempt}/{RECEIPT_NUMBER_ATTEMPTS})"
                )

        logger.info(
            f"Payment {entry.receipt_number} of {config.format_money(entry.amount)} added to "
            f"billing record {record.pk}; paid {record.amount_paid}, "
            f"balance {record.balance}, status {record.status}"
        )
        return entry

    @staticmethod
    @transaction.atomic
    def remove_payment(record_id, receipt_number):
        """
        Remove the entry with the given receipt number from a record.

        Returns:
            PaymentEntry: the removed entry (no longer in the database)

        Raises:
            RecordNotFound, UnknownReceipt
        """
        record = BillingService.get_record(record_id, for_update=True)

        try:
            entry = PaymentEntry.objects.get(record=record, receipt_number=receipt_number)
        except PaymentEntry.DoesNotExist:
            raise UnknownReceipt(
                f"No payment with receipt number {receipt_number} on billing record {record_id}"
            )

        # The post_delete signal re-saves the record
        entry.delete()
        record.refresh_from_db()

        logger.info(
            f"Payment {receipt_number} removed from billing record {record.pk}; "
            f"paid {record.amount_paid}, balance {record.balance}, status {record.status}"
        )
        entry.record = record
        return entry

    @staticmethod
    @transaction.atomic
    def update_total_amount(record_id, total_amount):
        """
        Change the amount owed for a record and re-derive its state.

        Returns:
            BillingRecord

        Raises:
            RecordNotFound, InvalidAmount
        """
        total_amount = validate_total_amount(total_amount)
        record = BillingService.get_record(record_id, for_update=True)

        previous = record.total_amount
        record.total_amount = total_amount
        record.save()

        logger.info(
            f"Billing record {record.pk} total changed from {previous} to {total_amount}; "
            f"status {record.status}"
        )
        return record

    @staticmethod
    @transaction.atomic
    def delete_billing_record(record_id):
        """
        Delete a billing record together with its entries.

        Raises:
            RecordNotFound
        """
        record = BillingService.get_record(record_id, for_update=True)
        description = str(record)
        record.delete()
        logger.info(f"Deleted billing record {record_id} ({description})")
