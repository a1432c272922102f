# students/models.py

from datetime import date

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# QUERYSET
# =============================================================================

class StudentQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status='active')

    def search(self, term):
        """Match first name, last name or parent name (case-insensitive)"""
        if not term:
            return self
        return self.filter(
            Q(first_name__icontains=term)
            | Q(last_name__icontains=term)
            | Q(parent_name__icontains=term)
        )

    def visible_to(self, profile):
        """Parents only see their own children; staff see every student."""
        if profile.is_parent():
            return self.filter(parent_user=profile.user)
        return self


# =============================================================================
# STUDENT MODEL
# =============================================================================

class Student(BaseModel):
    """Core model for student information"""

    # -------------------------------------------------------------------------
    # CHOICE FIELDS
    # -------------------------------------------------------------------------

    GENDER_CHOICES = (
        ('Male', 'Male'),
        ('Female', 'Female'),
    )

    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    )

    # -------------------------------------------------------------------------
    # BASIC INFORMATION
    # -------------------------------------------------------------------------

    first_name = models.CharField("First Name", max_length=50)
    last_name = models.CharField("Last Name", max_length=50)
    date_of_birth = models.DateField("Date of Birth")
    gender = models.CharField("Gender", max_length=6, choices=GENDER_CHOICES)
    address = models.TextField("Address", blank=True, default='')

    # -------------------------------------------------------------------------
    # ACADEMIC INFORMATION
    # -------------------------------------------------------------------------

    class_level = models.CharField(
        "Class Level",
        max_length=50,
        db_index=True,
        help_text="One of the class levels configured for the center"
    )
    enrollment_date = models.DateField("Enrollment Date", default=date.today)
    status = models.CharField(
        "Status",
        max_length=10,
        choices=STATUS_CHOICES,
        default='active',
        db_index=True
    )
    notes = models.TextField("Notes", blank=True, default='')

    # -------------------------------------------------------------------------
    # PARENT INFORMATION
    # -------------------------------------------------------------------------

    parent_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name="Parent Account",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='children',
        help_text="Parent login that may view this student's records"
    )
    parent_name = models.CharField("Parent Name", max_length=100, blank=True, default='')
    parent_phone = models.CharField("Parent Phone", max_length=20, blank=True, default='')
    parent_email = models.EmailField("Parent Email", blank=True, default='')

    objects = StudentQuerySet.as_manager()

    class Meta:
        ordering = ['last_name', 'first_name']
        verbose_name = "Student"
        verbose_name_plural = "Students"
        indexes = [
            models.Index(fields=['first_name', 'last_name'], name='student_name_idx'),
        ]

    def __str__(self):
        return self.full_name

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def age(self):
        """Age in whole years"""
        if not self.date_of_birth:
            return None
        today = date.today()
        return (
            today.year - self.date_of_birth.year
            - ((today.month, today.day) < (self.date_of_birth.month, self.date_of_birth.day))
        )

    def is_active(self):
        return self.status == 'active'

    # -------------------------------------------------------------------------
    # VALIDATION
    # -------------------------------------------------------------------------

    def clean(self):
        super().clean()
        errors = {}

        if self.date_of_birth and self.date_of_birth > date.today():
            errors['date_of_birth'] = "Date of birth cannot be in the future"

        if self.date_of_birth and self.enrollment_date and self.enrollment_date < self.date_of_birth:
            errors['enrollment_date'] = "Enrollment date cannot be before date of birth"

        if errors:
            raise ValidationError(errors)

    def to_dict(self):
        return {
            'id': str(self.id),
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'age': self.age,
            'gender': self.gender,
            'class_level': self.class_level,
            'status': self.status,
            'enrollment_date': self.enrollment_date.isoformat() if self.enrollment_date else None,
            'address': self.address,
            'notes': self.notes,
            'parent_user_id': self.parent_user_id,
            'parent_name': self.parent_name,
            'parent_phone': self.parent_phone,
            'parent_email': self.parent_email,
        }
