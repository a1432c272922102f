# fees/signals.py

"""
Billing Signal Handlers

- Every BillingRecord save re-derives amount_paid, balance and status
- Creating or deleting a PaymentEntry re-saves its billing record, so
  changes made from the admin site or the shell keep records in sync
  (skipped when the entry goes because its record is deleted)
- Status changes and overpayments go to the edutrack.ledger logger
"""

from django.db.models.signals import pre_save, post_save, post_delete
from django.dispatch import receiver
import logging

from fees.models import BillingRecord, PaymentEntry

logger = logging.getLogger(__name__)
ledger_logger = logging.getLogger('edutrack.ledger')


# =============================================================================
# BILLING RECORD SIGNALS
# =============================================================================

@receiver(pre_save, sender=BillingRecord)
def billing_record_pre_save(sender, instance, **kwargs):
    """
    Reconcile the record before it is written.
    Derived fields are always recomputed from the stored entries.
    """
    # Skip if in raw mode (fixtures)
    if kwargs.get('raw', False):
        return

    previous_status = None
    if not instance._state.adding:
        previous_status = (
            sender.objects.filter(pk=instance.pk).values_list('status', flat=True).first()
        )

    summary = instance.reconcile()

    if previous_status is not None and previous_status != summary.status:
        ledger_logger.info(
            f"Billing record {instance.pk} ({instance.billing_period}) status "
            f"{previous_status} -> {summary.status}: paid {summary.amount_paid} "
            f"of {instance.total_amount}, balance {summary.balance}"
        )

    if summary.overpayment > 0:
        ledger_logger.warning(
            f"Billing record {instance.pk} ({instance.billing_period}) overpaid by "
            f"{summary.overpayment}: paid {summary.amount_paid} of {instance.total_amount}"
        )


# =============================================================================
# PAYMENT ENTRY SIGNALS
# =============================================================================

def _resync_record(record):
    if record is not None:
        record.save()


@receiver(post_save, sender=PaymentEntry)
def payment_entry_post_save(sender, instance, created, **kwargs):
    """Re-save the parent record so the new entry is counted"""
    if kwargs.get('raw', False) or not created:
        return
    # Same instance the caller holds, so it sees the reconciled values
    _resync_record(instance.record)


@receiver(post_delete, sender=PaymentEntry)
def payment_entry_post_delete(sender, instance, origin=None, **kwargs):
    """Re-save the parent record so the removed entry no longer counts"""
    # Cascade from deleting billing records (one or a queryset): they are going too
    if isinstance(origin, BillingRecord) or getattr(origin, 'model', None) is BillingRecord:
        return

    _resync_record(BillingRecord.objects.filter(pk=instance.record_id).first())
    ledger_logger.info(
        f"Payment {instance.receipt_number} of {instance.amount} removed "
        f"from billing record {instance.record_id}"
    )
