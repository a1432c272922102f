# fees/utils.py

"""
Fee Management Utility Functions

Contains:
- Receipt number generation
- Billing period, amount and payment data validation
"""

from decimal import Decimal, InvalidOperation
import re
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import IntegerField
from django.db.models.functions import Cast, Substr

from core.utils import generate_reference_number, get_center_today
from utils.utils import BadRequest, parse_date_value
from .exceptions import InvalidAmount, InvalidBillingPeriod

logger = logging.getLogger(__name__)

BILLING_PERIOD_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')

CENT = Decimal('0.01')


# =============================================================================
# REFERENCE NUMBER GENERATION
# =============================================================================

def generate_receipt_number(config, on_date=None):
    """
    Generate the next receipt number for the center.
    Format: {prefix}-{year}-{NNNNN}, e.g. TUT-2026-00042

    The sequence restarts every year and continues from the highest
    numeric suffix already issued for that prefix and year (past 99999
    the number simply grows a digit). The row holding that number is
    locked; the first receipt of a year has no row to lock, so two
    concurrent first payments can still collide on the unique column
    and the caller retries (see BillingService._append_entry).

    Args:
        config (CenterConfig): receipt prefix comes from here
        on_date (date): date the receipt is issued (defaults to today)

    Returns:
        str: Unique receipt number
    """
    from fees.models import PaymentEntry

    on_date = on_date or get_center_today()
    search_prefix = f"{config.receipt_prefix}-{on_date.year}-"

    with transaction.atomic():
        last_number = (
            PaymentEntry.objects.filter(receipt_number__regex=rf'^{re.escape(search_prefix)}[0-9]+$')
            .annotate(number=Cast(Substr('receipt_number', len(search_prefix) + 1), IntegerField()))
            .select_for_update()
            .order_by('-number')
            .values_list('number', flat=True)
            .first()
        )

    return generate_reference_number(config.receipt_prefix, (last_number or 0) + 1, on_date.year)


# =============================================================================
# VALIDATION UTILITIES
# =============================================================================

def validate_billing_period(billing_period):
    """
    Check a YYYY-MM month token.

    Raises:
        InvalidBillingPeriod
    """
    billing_period = (billing_period or '').strip() if isinstance(billing_period, str) else billing_period
    if not isinstance(billing_period, str) or not BILLING_PERIOD_RE.match(billing_period):
        raise InvalidBillingPeriod(f"Billing period must be in YYYY-MM format, got {billing_period!r}")
    return billing_period


def _to_money(value, field_name):
    if isinstance(value, bool):
        raise InvalidAmount(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"{field_name} must be a number")
    if not amount.is_finite():
        raise InvalidAmount(f"{field_name} must be a finite number")
    if amount != amount.quantize(CENT):
        raise InvalidAmount(f"{field_name} cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def validate_total_amount(total_amount):
    """
    Total amount due for a period: a non-negative money value.

    Raises:
        InvalidAmount
    """
    if total_amount is None or total_amount == '':
        raise InvalidAmount("Total amount is required")
    amount = _to_money(total_amount, "Total amount")
    if amount < 0:
        raise InvalidAmount("Total amount cannot be negative")
    return amount


def validate_payment_data(payment_data):
    """
    Validate and normalise the data of one payment entry.

    Args:
        payment_data: dict with amount, payment_method, optional
            payment_date (date or 'YYYY-MM-DD', defaults to today) and notes

    Returns:
        dict: amount (Decimal), payment_method, payment_date (date), notes

    Raises:
        InvalidAmount: amount missing, not a number or not positive
        ValidationError: unknown payment method, bad or future date, notes that are not text
    """
    from fees.models import PaymentEntry

    amount = payment_data.get('amount')
    if amount is None or amount == '':
        raise InvalidAmount("Payment amount is required")
    amount = _to_money(amount, "Payment amount")
    if amount <= 0:
        raise InvalidAmount("Payment amount must be positive")

    payment_method = payment_data.get('payment_method') or 'cash'
    valid_methods = [choice for choice, _ in PaymentEntry.PAYMENT_METHOD_CHOICES]
    if payment_method not in valid_methods:
        raise ValidationError(f"Payment method must be one of: {', '.join(valid_methods)}")

    today = get_center_today()
    try:
        payment_date = parse_date_value(payment_data.get('payment_date'), 'payment_date', default=today)
    except BadRequest as e:
        raise ValidationError(str(e))
    if payment_date > today:
        raise ValidationError("Payment date cannot be in the future")

    notes = payment_data.get('notes')
    if notes is None:
        notes = ''
    elif not isinstance(notes, str):
        raise ValidationError("Notes must be text")

    return {
        'amount': amount,
        'payment_method': payment_method,
        'payment_date': payment_date,
        'notes': notes.strip(),
    }
