# core/models.py

"""
Core models for EduTrack.

CenterSettings holds the editable, per-center configuration (name,
subjects, class levels, currency, grading). Nothing reads it implicitly:
code that needs settings builds a core.config.CenterConfig snapshot from
the row and passes it along.
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from django_countries.fields import CountryField
import logging

from utils.models import BaseModel
from core.utils import resolve_currency

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_SUBJECTS = [
    'Mathematics',
    'Physics',
    'Chemistry',
    'English',
    'French',
    'Biology',
    'History',
    'Geography',
]

DEFAULT_CLASS_LEVELS = [
    'Form 1',
    'Form 2',
    'Form 3',
    'Form 4',
    'Form 5',
    'Lower 6',
    'Upper 6',
]


def default_subjects():
    return list(DEFAULT_SUBJECTS)


def default_class_levels():
    return list(DEFAULT_CLASS_LEVELS)


phone_validator = RegexValidator(
    regex=r'^\+?[\d\s-]{6,20}$',
    message="Phone number may only contain digits, spaces, dashes and a leading '+'."
)

academic_year_validator = RegexValidator(
    regex=r'^\d{4}-\d{4}$',
    message="Academic year must look like '2025-2026'."
)


# =============================================================================
# CENTER SETTINGS MODEL
# =============================================================================

class CenterSettings(BaseModel):
    """
    Editable configuration of a tutorial center.

    One row per owning admin user. Use core.config.get_center_config()
    to obtain the immutable snapshot that services expect.
    """

    GRADING_SCALE_CHOICES = [
        ('percentage', 'Percentage'),
        ('gpa', 'GPA'),
        ('letter', 'Letter Grade'),
    ]

    DATE_FORMAT_CHOICES = [
        ('DD/MM/YYYY', 'DD/MM/YYYY'),
        ('MM/DD/YYYY', 'MM/DD/YYYY'),
        ('YYYY-MM-DD', 'YYYY-MM-DD'),
    ]

    LANGUAGE_CHOICES = [
        ('en', 'English'),
        ('fr', 'French'),
    ]

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='center_settings',
        verbose_name="Owner",
    )

    # -------------------------------------------------------------------------
    # CENTER INFORMATION
    # -------------------------------------------------------------------------

    center_name = models.CharField("Center Name", max_length=191, default='Tutorial Center')
    center_email = models.EmailField("Center Email", blank=True, default='')
    center_phone = models.CharField(
        "Center Phone",
        max_length=20,
        blank=True,
        default='',
        validators=[phone_validator]
    )
    center_address = models.TextField("Center Address", blank=True, default='')
    country = CountryField("Country", blank_label='(Select Country)', default='CM')

    # -------------------------------------------------------------------------
    # ACADEMIC CONFIGURATION
    # -------------------------------------------------------------------------

    subjects = models.JSONField(
        "Subjects",
        default=default_subjects,
        blank=True,
        help_text="List of subject names taught at the center"
    )
    class_levels = models.JSONField(
        "Class Levels",
        default=default_class_levels,
        blank=True,
        help_text="Ordered list of class levels, e.g. ['Form 1', 'Form 2']"
    )
    academic_year = models.CharField(
        "Academic Year",
        max_length=9,
        default='2025-2026',
        validators=[academic_year_validator]
    )
    grading_scale = models.CharField(
        "Grading Scale",
        max_length=20,
        choices=GRADING_SCALE_CHOICES,
        default='percentage'
    )
    passing_grade = models.DecimalField(
        "Passing Grade (%)",
        max_digits=5,
        decimal_places=2,
        default=Decimal('50'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )

    # -------------------------------------------------------------------------
    # FINANCIAL CONFIGURATION
    # -------------------------------------------------------------------------

    currency = models.CharField("Currency", max_length=10, default='FCFA')
    default_payment_amount = models.DecimalField(
        "Default Payment Amount",
        max_digits=12,
        decimal_places=2,
        default=Decimal('20000'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    receipt_prefix = models.CharField(
        "Receipt Prefix",
        max_length=10,
        default='TUT',
        validators=[RegexValidator(r'^[A-Z0-9]+$', "Receipt prefix must be upper-case letters or digits.")]
    )

    # -------------------------------------------------------------------------
    # DISPLAY
    # -------------------------------------------------------------------------

    date_format = models.CharField(
        "Date Format",
        max_length=12,
        choices=DATE_FORMAT_CHOICES,
        default='DD/MM/YYYY'
    )
    language = models.CharField("Language", max_length=5, choices=LANGUAGE_CHOICES, default='en')

    class Meta:
        verbose_name = "Center Settings"
        verbose_name_plural = "Center Settings"
        ordering = ['created_at']

    def __str__(self):
        return f"{self.center_name} ({self.owner})"

    # -------------------------------------------------------------------------
    # VALIDATION
    # -------------------------------------------------------------------------

    def clean(self):
        errors = {}

        for field_name in ('subjects', 'class_levels'):
            value = getattr(self, field_name)
            if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
                errors[field_name] = "Must be a list of non-empty names."
            elif len({item.strip().lower() for item in value}) != len(value):
                errors[field_name] = "Names must be unique."

        if resolve_currency(self.currency) is None:
            errors['currency'] = f"Unknown currency code: {self.currency}"

        if self.academic_year and academic_year_validator.regex.match(self.academic_year):
            start, end = (int(part) for part in self.academic_year.split('-'))
            if end != start + 1:
                errors['academic_year'] = "Academic year must span two consecutive years."

        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.receipt_prefix = (self.receipt_prefix or 'TUT').upper()
        if isinstance(self.subjects, list):
            self.subjects = [item.strip() for item in self.subjects if isinstance(item, str)]
        if isinstance(self.class_levels, list):
            self.class_levels = [item.strip() for item in self.class_levels if isinstance(item, str)]
        super().save(*args, **kwargs)
        logger.debug(f"CenterSettings saved for owner {self.owner_id}")

    def to_dict(self):
        return {
            'id': str(self.id),
            'center_name': self.center_name,
            'center_email': self.center_email,
            'center_phone': self.center_phone,
            'center_address': self.center_address,
            'country': str(self.country),
            'subjects': list(self.subjects),
            'class_levels': list(self.class_levels),
            'academic_year': self.academic_year,
            'grading_scale': self.grading_scale,
            'passing_grade': float(self.passing_grade),
            'currency': self.currency,
            'default_payment_amount': float(self.default_payment_amount),
            'receipt_prefix': self.receipt_prefix,
            'date_format': self.date_format,
            'language': self.language,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
