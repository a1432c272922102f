# core/config.py

"""
Immutable center configuration.

Services, statistics and exports receive a CenterConfig explicitly rather
than looking settings up on their own, so a single request always works
against one consistent snapshot.

Usage:
    config = get_center_config(request.user)
    BillingService.add_payment(record_id, data, config, received_by=...)
"""

from dataclasses import dataclass, field
from decimal import Decimal
import logging

from core.models import CenterSettings, DEFAULT_SUBJECTS, DEFAULT_CLASS_LEVELS
from core.utils import currency_label, format_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CenterConfig:
    center_name: str = 'Tutorial Center'
    center_email: str = ''
    center_phone: str = ''
    center_address: str = ''
    country: str = 'CM'
    subjects: tuple = field(default_factory=lambda: tuple(DEFAULT_SUBJECTS))
    class_levels: tuple = field(default_factory=lambda: tuple(DEFAULT_CLASS_LEVELS))
    academic_year: str = '2025-2026'
    grading_scale: str = 'percentage'
    passing_grade: Decimal = Decimal('50')
    currency: str = 'FCFA'
    default_payment_amount: Decimal = Decimal('20000')
    receipt_prefix: str = 'TUT'
    date_format: str = 'DD/MM/YYYY'
    language: str = 'en'

    @classmethod
    def default(cls):
        return cls()

    @classmethod
    def from_settings(cls, center_settings):
        """Snapshot a CenterSettings row."""
        return cls(
            center_name=center_settings.center_name,
            center_email=center_settings.center_email,
            center_phone=center_settings.center_phone,
            center_address=center_settings.center_address,
            country=str(center_settings.country),
            subjects=tuple(center_settings.subjects or ()),
            class_levels=tuple(center_settings.class_levels or ()),
            academic_year=center_settings.academic_year,
            grading_scale=center_settings.grading_scale,
            passing_grade=Decimal(str(center_settings.passing_grade)),
            currency=center_settings.currency,
            default_payment_amount=Decimal(str(center_settings.default_payment_amount)),
            receipt_prefix=center_settings.receipt_prefix,
            date_format=center_settings.date_format,
            language=center_settings.language,
        )

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def format_money(self, amount):
        return format_money(amount, self.currency)

    @property
    def currency_label(self):
        return currency_label(self.currency)

    @property
    def strftime_format(self):
        return {
            'DD/MM/YYYY': '%d/%m/%Y',
            'MM/DD/YYYY': '%m/%d/%Y',
            'YYYY-MM-DD': '%Y-%m-%d',
        }.get(self.date_format, '%d/%m/%Y')

    def format_date(self, value):
        return value.strftime(self.strftime_format) if value else ''

    def is_known_class_level(self, class_level):
        return class_level in self.class_levels

    def is_known_subject(self, subject):
        return subject in self.subjects


def get_center_config(user=None):
    """
    Build the CenterConfig for a request.

    The user's own settings row wins; otherwise the oldest row (the
    center's first admin) is used; with no rows at all the defaults apply.
    """
    center_settings = None
    if user is not None and getattr(user, 'is_authenticated', False):
        center_settings = CenterSettings.objects.filter(owner=user).first()
    if center_settings is None:
        center_settings = CenterSettings.objects.order_by('created_at').first()
    if center_settings is None:
        logger.debug("No CenterSettings saved yet, using defaults")
        return CenterConfig.default()
    return CenterConfig.from_settings(center_settings)
