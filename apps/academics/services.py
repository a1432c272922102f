# academics/services.py

"""
Academic Services Module

Business logic for attendance marking:
- Single mark (create or update the student's row for the day)
- Bulk marking for a whole class in one transaction

All services use @transaction.atomic for data consistency
"""

from django.core.exceptions import ValidationError
from django.db import transaction
import logging

from .forms import AttendanceMarkForm
from .models import Attendance

logger = logging.getLogger(__name__)


# =============================================================================
# ATTENDANCE SERVICE
# =============================================================================

class AttendanceService:
    """Daily attendance workflow"""

    @staticmethod
    @transaction.atomic
    def mark_attendance(student, date, status, marked_by='', notes=''):
        """
        Record a student's attendance for a day.

        Marking a day that already has a record updates its status.

        Args:
            student (Student): Student being marked
            date (date): Day of attendance
            status (str): present | absent | late | excused
            marked_by (str): Username of the staff member
            notes (str): Optional remark

        Returns:
            tuple: (attendance, created)

        Raises:
            ValidationError: unknown status
        """
        valid_statuses = [choice for choice, _ in Attendance.STATUS_CHOICES]
        if status not in valid_statuses:
            raise ValidationError(f"Status must be one of: {', '.join(valid_statuses)}")

        attendance, created = Attendance.objects.update_or_create(
            student=student,
            date=date,
            defaults={
                'status': status,
                'marked_by': marked_by,
                'notes': notes or '',
            }
        )

        logger.info(
            f"{'Marked' if created else 'Updated'} attendance for {student.full_name} "
            f"on {date}: {status}"
        )
        return attendance, created

    @staticmethod
    @transaction.atomic
    def bulk_mark_attendance(records, marked_by=''):
        """
        Mark attendance for several students at once.

        Args:
            records (list): dicts with student, date, status and optional notes
                (raw request values; each is validated with AttendanceMarkForm)
            marked_by (str): Username of the staff member

        Returns:
            dict: {'created': int, 'updated': int, 'records': [Attendance, ...]}

        Raises:
            ValidationError: any record is invalid; nothing is saved

        Example:
            AttendanceService.bulk_mark_attendance([
                {'student': student_id, 'date': '2026-01-12', 'status': 'present'},
                {'student': other_id, 'date': '2026-01-12', 'status': 'late'},
            ], marked_by='teacher1')
        """
        if not records:
            raise ValidationError("No attendance records supplied")

        cleaned = []
        errors = []
        for index, record in enumerate(records):
            form = AttendanceMarkForm(record if isinstance(record, dict) else {})
            if form.is_valid():
                cleaned.append(form.cleaned_data)
            else:
                for field, messages in form.errors.items():
                    errors.extend(f"Record {index + 1} {field}: {message}" for message in messages)

        if errors:
            raise ValidationError(errors)

        result = {'created': 0, 'updated': 0, 'records': []}
        for data in cleaned:
            attendance, created = AttendanceService.mark_attendance(
                data['student'],
                data['date'],
                data['status'],
                marked_by=marked_by,
                notes=data.get('notes', ''),
            )
            result['created' if created else 'updated'] += 1
            result['records'].append(attendance)

        logger.info(
            f"Bulk attendance by {marked_by or 'system'}: "
            f"{result['created']} created, {result['updated']} updated"
        )
        return result
