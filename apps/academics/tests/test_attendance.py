# academics/tests/test_attendance.py

from datetime import date

from django.core.exceptions import ValidationError
from django.test import TestCase

from academics.models import Attendance
from academics.services import AttendanceService
from academics.stats import get_attendance_statistics
from utils.tests.factories import make_student


class AttendanceServiceTests(TestCase):

    def setUp(self):
        self.amina = make_student('Amina', 'Njoya')
        self.paul = make_student('Paul', 'Biya', class_level='Form 2')
        self.day = date(2026, 1, 12)

    def test_marking_twice_updates_the_same_row(self):
        _, created = AttendanceService.mark_attendance(self.amina, self.day, 'present', marked_by='t1')
        self.assertTrue(created)

        attendance, created = AttendanceService.mark_attendance(self.amina, self.day, 'late', marked_by='t2')
        self.assertFalse(created)
        self.assertEqual(attendance.status, 'late')
        self.assertEqual(attendance.marked_by, 't2')
        self.assertEqual(Attendance.objects.count(), 1)

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValidationError):
            AttendanceService.mark_attendance(self.amina, self.day, 'asleep')

    def test_bulk_mark(self):
        AttendanceService.mark_attendance(self.amina, self.day, 'absent')
        result = AttendanceService.bulk_mark_attendance([
            {'student': str(self.amina.pk), 'date': '2026-01-12', 'status': 'present'},
            {'student': str(self.paul.pk), 'date': '2026-01-12', 'status': 'excused'},
        ], marked_by='t1')

        self.assertEqual(result['created'], 1)
        self.assertEqual(result['updated'], 1)
        self.assertEqual(Attendance.objects.get(student=self.amina).status, 'present')

    def test_bulk_mark_is_all_or_nothing(self):
        with self.assertRaises(ValidationError) as ctx:
            AttendanceService.bulk_mark_attendance([
                {'student': str(self.amina.pk), 'date': '2026-01-12', 'status': 'present'},
                {'student': str(self.paul.pk), 'date': 'not a date', 'status': 'present'},
            ])
        self.assertTrue(any(message.startswith('Record 2 date') for message in ctx.exception.messages))
        self.assertEqual(Attendance.objects.count(), 0)

    def test_attendance_statistics(self):
        AttendanceService.mark_attendance(self.amina, date(2026, 1, 12), 'present')
        AttendanceService.mark_attendance(self.amina, date(2026, 1, 13), 'present')
        AttendanceService.mark_attendance(self.amina, date(2026, 1, 14), 'absent')
        AttendanceService.mark_attendance(self.paul, date(2026, 1, 12), 'late')

        stats = get_attendance_statistics()
        self.assertEqual(stats['total'], 4)
        self.assertEqual(stats['present'], 2)
        self.assertEqual(stats['late'], 1)
        self.assertEqual(stats['attendance_rate'], 50.0)

        stats = get_attendance_statistics({'class_level': 'Form 1', 'date_to': date(2026, 1, 13)})
        self.assertEqual(stats['total'], 2)
        self.assertEqual(stats['attendance_rate'], 100.0)
