# core/utils.py

"""
Central utilities for EduTrack.
Money formatting, percentages and reference numbers shared across apps.
"""
from decimal import Decimal, InvalidOperation
import logging

from django.utils import timezone
import pycountry

logger = logging.getLogger(__name__)


# =============================================================================
# CURRENCY & MONEY FORMATTING
# =============================================================================

# Local names that are not ISO 4217 codes
CURRENCY_ALIASES = {
    'FCFA': 'XAF',
    'CFA': 'XOF',
}

ZERO_DECIMAL_CURRENCIES = {'XAF', 'XOF', 'JPY', 'KRW', 'VND', 'CLP', 'PYG', 'UGX', 'RWF'}


def resolve_currency(code):
    """
    Look up a currency by code or local alias.

    Returns:
        pycountry currency record, or None when the code is unknown

    Example:
        >>> resolve_currency('FCFA').name
        'CFA Franc BEAC'
    """
    if not code:
        return None
    alpha_3 = CURRENCY_ALIASES.get(code.strip().upper(), code.strip().upper())
    return pycountry.currencies.get(alpha_3=alpha_3)


def currency_label(code):
    """Human readable currency name, e.g. 'CFA Franc BEAC (FCFA)'."""
    currency = resolve_currency(code)
    if currency is None:
        return code
    return f"{currency.name} ({code})"


def is_zero_decimal_currency(code):
    """True when amounts in this currency are written without cents."""
    currency_record = resolve_currency(code)
    alpha_3 = currency_record.alpha_3 if currency_record else (code or '').upper()
    return alpha_3 in ZERO_DECIMAL_CURRENCIES


def format_money(amount, currency='FCFA'):
    """
    Format an amount with thousands separators and the currency code.

    Zero-decimal currencies (such as the CFA francs) are shown without cents.

    Example:
        >>> format_money(Decimal('20000'), 'FCFA')
        '20,000 FCFA'
    """
    amount = safe_decimal(amount)
    if is_zero_decimal_currency(currency):
        formatted = f"{amount:,.0f}"
    else:
        formatted = f"{amount:,.2f}"
    return f"{formatted} {currency}" if currency else formatted


def calculate_percentage(part, whole, decimal_places=2):
    """
    Calculate percentage with safe division.

    Returns:
        Decimal: Percentage value, 0 if whole is 0

    Example:
        >>> calculate_percentage(75, 100)   # Decimal('75.00')
        >>> calculate_percentage(2, 3, 1)   # Decimal('66.7')
    """
    try:
        part = Decimal(str(part or 0))
        whole = Decimal(str(whole or 0))

        if whole == 0:
            return Decimal('0').quantize(Decimal(1).scaleb(-decimal_places))

        percentage = (part / whole) * 100
        return percentage.quantize(Decimal(1).scaleb(-decimal_places))
    except (ValueError, TypeError, InvalidOperation):
        return Decimal('0')


def safe_decimal(value, default=Decimal('0.00')):
    """
    Safely convert value to Decimal.

    Example:
        >>> safe_decimal("12.5")      # Decimal('12.5')
        >>> safe_decimal("invalid")   # Decimal('0.00')
    """
    try:
        return Decimal(str(value))
    except (ValueError, TypeError, InvalidOperation):
        return default


# =============================================================================
# DATES & REFERENCES
# =============================================================================

def get_center_today():
    """Today's date in the configured TIME_ZONE."""
    return timezone.localdate()


def generate_reference_number(prefix, sequence_number, year=None):
    """
    Generate formatted reference number.

    Example:
        >>> generate_reference_number('TUT', 123, 2026)
        'TUT-2026-00123'
    """
    if year is None:
        year = get_center_today().year

    return f"{prefix}-{year}-{sequence_number:05d}"
