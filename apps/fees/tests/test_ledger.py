# fees/tests/test_ledger.py

from decimal import Decimal
from types import SimpleNamespace

from fees.models import BillingRecord
from fees.services import LedgerSummary, PaymentLedger


def make_record(total, amounts=()):
    return SimpleNamespace(
        total_amount=Decimal(str(total)),
        payments=[SimpleNamespace(amount=Decimal(str(amount))) for amount in amounts],
        # stale derived values that must never be read
        amount_paid=Decimal('999'),
        balance=Decimal('-1'),
        status='paid',
    )


def reconcile(record):
    return PaymentLedger.reconcile(record.total_amount, [entry.amount for entry in record.payments])


def test_no_payments_is_pending():
    summary = reconcile(make_record(15000))
    assert summary.amount_paid == Decimal('0')
    assert summary.balance == Decimal('15000')
    assert summary.status == BillingRecord.STATUS_PENDING


def test_exact_payment_is_paid():
    summary = reconcile(make_record(15000, [15000]))
    assert summary.amount_paid == Decimal('15000')
    assert summary.balance == Decimal('0')
    assert summary.status == BillingRecord.STATUS_PAID


def test_partial_payments():
    summary = reconcile(make_record(15000, [5000, 5000]))
    assert summary.amount_paid == Decimal('10000')
    assert summary.balance == Decimal('5000')
    assert summary.status == BillingRecord.STATUS_PARTIAL


def test_overpayment_clamps_balance_and_keeps_amount_paid():
    summary = reconcile(make_record(15000, [20000]))
    assert summary.amount_paid == Decimal('20000')
    assert summary.balance == Decimal('0')
    assert summary.status == BillingRecord.STATUS_PAID
    assert summary.overpayment == Decimal('5000')


def test_removing_only_entry_returns_to_pending():
    record = make_record(15000, [15000])
    assert reconcile(record).status == BillingRecord.STATUS_PAID

    record.payments.pop()
    summary = reconcile(record)
    assert summary == LedgerSummary(Decimal('0.00'), Decimal('15000'), BillingRecord.STATUS_PENDING)


def test_exact_decimal_sum():
    summary = reconcile(make_record('100.00', ['0.10', '0.20', '33.33']))
    assert summary.amount_paid == Decimal('33.63')
    assert summary.balance == Decimal('66.37')


def test_idempotent():
    record = make_record(15000, [2500, 2500])
    first = reconcile(record)
    record.amount_paid, record.balance, record.status = first.amount_paid, first.balance, first.status
    assert reconcile(record) == first


def test_accepts_non_decimal_inputs():
    summary = PaymentLedger.reconcile(20000, [5000, '3000'])
    assert summary.amount_paid == Decimal('8000.00')
    assert summary.balance == Decimal('12000.00')


def test_status_is_exclusive_and_exhaustive():
    total = Decimal('1000')
    for paid in ['0', '0.01', '500', '999.99', '1000', '1000.01', '5000']:
        amounts = [Decimal(paid)] if Decimal(paid) > 0 else []
        summary = PaymentLedger.reconcile(total, amounts)

        expected = (
            BillingRecord.STATUS_PENDING if summary.amount_paid <= 0
            else BillingRecord.STATUS_PAID if summary.amount_paid >= total
            else BillingRecord.STATUS_PARTIAL
        )
        assert summary.status == expected
        assert summary.balance == max(total - summary.amount_paid, Decimal('0'))
        assert summary.balance >= 0


def test_zero_total_without_payments_is_pending():
    summary = PaymentLedger.reconcile(Decimal('0'), [])
    assert summary.status == BillingRecord.STATUS_PENDING
    assert summary.balance == Decimal('0')
