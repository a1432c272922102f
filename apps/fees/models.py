# fees/models.py

"""
Tuition Billing Models

- BillingRecord: what a student owes for one billing period (YYYY-MM)
- PaymentEntry: one installment paid against a record

amount_paid, balance and status on BillingRecord are derived. They are
recomputed from the entries on every save (see fees.signals) and are
never edited directly.

All user tracking handled automatically by BaseModel
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


billing_period_validator = RegexValidator(
    regex=r'^\d{4}-(0[1-9]|1[0-2])$',
    message="Billing period must be in YYYY-MM format"
)


# =============================================================================
# BILLING RECORD MODEL
# =============================================================================

class BillingRecord(BaseModel):
    """Amount owed by a student for one billing period, with its payments"""

    STATUS_PENDING = 'pending'
    STATUS_PARTIAL = 'partial'
    STATUS_PAID = 'paid'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PARTIAL, 'Partially Paid'),
        (STATUS_PAID, 'Paid'),
    ]

    # -------------------------------------------------------------------------
    # CORE RELATIONSHIPS
    # -------------------------------------------------------------------------

    student = models.ForeignKey(
        'students.Student',
        verbose_name="Student",
        on_delete=models.CASCADE,
        related_name='billing_records'
    )
    billing_period = models.CharField(
        "Billing Period",
        max_length=7,
        validators=[billing_period_validator],
        db_index=True,
        help_text="Month being billed, e.g. 2026-01"
    )
    class_level = models.CharField(
        "Class Level",
        max_length=50,
        blank=True,
        default='',
        help_text="Student's class level when the record was created"
    )

    # -------------------------------------------------------------------------
    # AMOUNTS
    # -------------------------------------------------------------------------

    total_amount = models.DecimalField(
        "Total Amount",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    amount_paid = models.DecimalField(
        "Amount Paid",
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False
    )
    balance = models.DecimalField(
        "Balance",
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        editable=False
    )
    status = models.CharField(
        "Status",
        max_length=10,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        editable=False,
        db_index=True
    )
    currency = models.CharField("Currency", max_length=10, default='FCFA')
    notes = models.TextField("Notes", blank=True, default='')

    class Meta:
        verbose_name = "Billing Record"
        verbose_name_plural = "Billing Records"
        ordering = ['-billing_period', 'student__last_name']
        constraints = [
            models.UniqueConstraint(
                fields=['student', 'billing_period'],
                name='unique_billing_record_per_student_period'
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'billing_period'], name='billing_status_period_idx'),
        ]

    def __str__(self):
        return f"{self.student} - {self.billing_period} ({self.get_status_display()})"

    def save(self, *args, **kwargs):
        # Derived fields are recomputed on every save and must always be written
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'amount_paid', 'balance', 'status'}
        super().save(*args, **kwargs)

    # -------------------------------------------------------------------------
    # RECONCILIATION
    # -------------------------------------------------------------------------

    def reconcile(self):
        """
        Re-derive amount_paid, balance and status from the stored entries.

        Only total_amount and the entries are read; the previously stored
        derived values are ignored and overwritten in memory.

        Returns:
            LedgerSummary
        """
        from fees.services import PaymentLedger

        if self._state.adding:
            amounts = []
        else:
            amounts = list(
                PaymentEntry.objects.filter(record_id=self.pk).values_list('amount', flat=True)
            )

        summary = PaymentLedger.reconcile(self.total_amount, amounts)
        self.amount_paid = summary.amount_paid
        self.balance = summary.balance
        self.status = summary.status
        return summary

    @property
    def overpayment(self):
        """Amount paid beyond the total; informational, not stored"""
        excess = (self.amount_paid or Decimal('0')) - (self.total_amount or Decimal('0'))
        return excess if excess > 0 else Decimal('0.00')

    def to_dict(self, include_payments=True):
        data = {
            'id': str(self.id),
            'student_id': str(self.student_id),
            'student_name': self.student.full_name,
            'class_level': self.class_level,
            'billing_period': self.billing_period,
            'total_amount': float(self.total_amount),
            'amount_paid': float(self.amount_paid),
            'balance': float(self.balance),
            'overpayment': float(self.overpayment),
            'status': self.status,
            'currency': self.currency,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_payments:
            data['payments'] = [entry.to_dict() for entry in self.payments.all()]
        return data


# =============================================================================
# PAYMENT ENTRY MODEL
# =============================================================================

class PaymentEntry(BaseModel):
    """
    One installment paid against a billing record.

    Entries are immutable: corrections are made by removing the entry
    and adding a new one.
    """

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('mobile_money', 'Mobile Money'),
        ('bank_transfer', 'Bank Transfer'),
        ('card', 'Card'),
    ]

    record = models.ForeignKey(
        BillingRecord,
        verbose_name="Billing Record",
        on_delete=models.CASCADE,
        related_name='payments'
    )
    sequence = models.PositiveIntegerField(
        "Sequence",
        editable=False,
        help_text="Position of the entry within its record"
    )

    amount = models.DecimalField(
        "Amount",
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_date = models.DateField("Payment Date", db_index=True)
    payment_method = models.CharField(
        "Payment Method",
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        default='cash'
    )
    receipt_number = models.CharField("Receipt Number", max_length=30, unique=True, db_index=True)
    received_by = models.CharField(
        "Received By",
        max_length=150,
        blank=True,
        default='',
        help_text="Staff member who received the payment"
    )
    notes = models.TextField("Notes", blank=True, default='')

    class Meta:
        verbose_name = "Payment Entry"
        verbose_name_plural = "Payment Entries"
        ordering = ['record_id', 'sequence']
        constraints = [
            models.UniqueConstraint(fields=['record', 'sequence'], name='unique_payment_entry_sequence'),
        ]

    def __str__(self):
        return f"{self.receipt_number} - {self.amount}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(
                "Payment entries cannot be modified. Remove the entry and add a new one."
            )
        if self.amount is None or self.amount <= 0:
            from fees.exceptions import InvalidAmount
            raise InvalidAmount("Payment amount must be positive")

        if self.sequence is None:
            last = PaymentEntry.objects.filter(record_id=self.record_id).aggregate(
                last=models.Max('sequence')
            )['last']
            self.sequence = (last or 0) + 1

        super().save(*args, **kwargs)

    def to_dict(self):
        return {
            'id': str(self.id),
            'sequence': self.sequence,
            'amount': float(self.amount),
            'payment_date': self.payment_date.isoformat(),
            'payment_method': self.payment_method,
            'receipt_number': self.receipt_number,
            'received_by': self.received_by,
            'notes': self.notes,
        }
