# academics/models.py

"""
Attendance and grade records.

Attendance is one row per student per day; marking the same day again
updates the existing row. Grades store the raw score and derive the
percentage on every save.
"""

from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# ATTENDANCE MODEL
# =============================================================================

class Attendance(BaseModel):
    """Daily attendance mark for a student"""

    STATUS_PRESENT = 'present'
    STATUS_ABSENT = 'absent'
    STATUS_LATE = 'late'
    STATUS_EXCUSED = 'excused'

    STATUS_CHOICES = [
        (STATUS_PRESENT, 'Present'),
        (STATUS_ABSENT, 'Absent'),
        (STATUS_LATE, 'Late'),
        (STATUS_EXCUSED, 'Excused'),
    ]

    student = models.ForeignKey(
        'students.Student',
        verbose_name="Student",
        on_delete=models.CASCADE,
        related_name='attendance_records'
    )
    date = models.DateField("Date", db_index=True)
    status = models.CharField("Status", max_length=10, choices=STATUS_CHOICES)
    notes = models.CharField("Notes", max_length=255, blank=True, default='')
    marked_by = models.CharField(
        "Marked By",
        max_length=150,
        blank=True,
        default='',
        help_text="Username of the staff member who took attendance"
    )

    class Meta:
        verbose_name = "Attendance"
        verbose_name_plural = "Attendance"
        ordering = ['-date', 'student__last_name']
        constraints = [
            models.UniqueConstraint(fields=['student', 'date'], name='unique_attendance_per_student_day'),
        ]

    def __str__(self):
        return f"{self.student} - {self.date} ({self.get_status_display()})"

    def to_dict(self):
        return {
            'id': str(self.id),
            'student_id': str(self.student_id),
            'student_name': self.student.full_name,
            'class_level': self.student.class_level,
            'date': self.date.isoformat(),
            'status': self.status,
            'notes': self.notes,
            'marked_by': self.marked_by,
        }


# =============================================================================
# GRADE MODEL
# =============================================================================

class Grade(BaseModel):
    """Score obtained by a student in one test"""

    TEST_TYPE_CHOICES = [
        ('quiz', 'Quiz'),
        ('exam', 'Exam'),
        ('homework', 'Homework'),
        ('assignment', 'Assignment'),
    ]

    student = models.ForeignKey(
        'students.Student',
        verbose_name="Student",
        on_delete=models.CASCADE,
        related_name='grades'
    )
    subject = models.CharField("Subject", max_length=100, db_index=True)
    test_name = models.CharField("Test Name", max_length=150)
    test_date = models.DateField("Test Date", db_index=True)
    test_type = models.CharField("Test Type", max_length=12, choices=TEST_TYPE_CHOICES, default='exam')

    score = models.DecimalField(
        "Score",
        max_digits=6,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    max_score = models.DecimalField(
        "Maximum Score",
        max_digits=6,
        decimal_places=2,
        default=Decimal('100'),
        validators=[MinValueValidator(Decimal('1'))]
    )
    percentage = models.DecimalField(
        "Percentage",
        max_digits=5,
        decimal_places=2,
        editable=False,
        default=Decimal('0')
    )
    notes = models.TextField("Notes", blank=True, default='')

    class Meta:
        verbose_name = "Grade"
        verbose_name_plural = "Grades"
        ordering = ['-test_date', 'subject']
        indexes = [
            models.Index(fields=['student', 'subject'], name='grade_student_subject_idx'),
        ]

    def __str__(self):
        return f"{self.student} - {self.subject} {self.test_name}: {self.score}/{self.max_score}"

    # -------------------------------------------------------------------------
    # DERIVED VALUES
    # -------------------------------------------------------------------------

    @staticmethod
    def compute_percentage(score, max_score):
        if not max_score:
            return Decimal('0.00')
        value = Decimal(str(score)) / Decimal(str(max_score)) * 100
        return value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def clean(self):
        super().clean()
        if self.score is not None and self.max_score is not None and self.score > self.max_score:
            raise ValidationError({'score': "Score cannot exceed the maximum score"})

    def save(self, *args, **kwargs):
        if self.score is not None and self.max_score is not None and self.score > self.max_score:
            raise ValidationError({'score': "Score cannot exceed the maximum score"})
        self.percentage = self.compute_percentage(self.score, self.max_score)

        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'percentage'}

        super().save(*args, **kwargs)

    def to_dict(self, config=None):
        from .utils import display_grade

        data = {
            'id': str(self.id),
            'student_id': str(self.student_id),
            'student_name': self.student.full_name,
            'subject': self.subject,
            'test_name': self.test_name,
            'test_date': self.test_date.isoformat(),
            'test_type': self.test_type,
            'score': float(self.score),
            'max_score': float(self.max_score),
            'percentage': float(self.percentage),
            'notes': self.notes,
        }
        if config is not None:
            data['display_grade'] = display_grade(self.percentage, config.grading_scale)
            data['passed'] = self.percentage >= config.passing_grade
        return data
