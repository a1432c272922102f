# fees/exceptions.py

"""
Billing ledger errors.

Each error also derives from the Django exception that matches how it
should surface: validation problems are ValidationErrors (HTTP 400),
lookups that miss are ObjectDoesNotExist (HTTP 404).
"""

from django.core.exceptions import ObjectDoesNotExist, ValidationError


class LedgerError(Exception):
    """Base class for billing ledger errors"""


class InvalidAmount(LedgerError, ValidationError):
    """Payment amount is not positive, or a total amount is negative"""


class InvalidBillingPeriod(LedgerError, ValidationError):
    """Billing period is not a YYYY-MM month token"""


class DuplicateBillingRecord(LedgerError, ValidationError):
    """The student is already billed for that period"""


class UnknownReceipt(LedgerError, ObjectDoesNotExist):
    """No payment entry on the record carries the given receipt number"""


class RecordNotFound(LedgerError, ObjectDoesNotExist):
    """Billing record id does not resolve"""
