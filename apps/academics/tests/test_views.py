# academics/tests/test_views.py

from datetime import date
from decimal import Decimal
import json

from django.test import TestCase
from django.urls import reverse

from academics.models import Attendance, Grade
from accounts.models import UserProfile
from utils.tests.factories import make_student, make_user


class AcademicsViewTests(TestCase):

    def setUp(self):
        self.teacher = make_user('teacher')
        self.parent = make_user('parent', role=UserProfile.ROLE_PARENT)
        self.child = make_student('Child', 'One', parent=self.parent)
        self.other = make_student('Other', 'Two')

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def grade_payload(self, student, **overrides):
        data = {
            'student': str(student.pk),
            'subject': 'Mathematics',
            'test_name': 'Midterm',
            'test_date': '2026-01-20',
            'score': 16,
            'max_score': 20,
        }
        data.update(overrides)
        return data

    # -------------------------------------------------------------------------
    # ATTENDANCE
    # -------------------------------------------------------------------------

    def test_teacher_marks_attendance(self):
        self.client.force_login(self.teacher)
        url = reverse('academics:attendance_mark')

        response = self.post_json(url, {'student': str(self.child.pk), 'date': '2026-01-12', 'status': 'present'})
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()['created'])

        response = self.post_json(url, {'student': str(self.child.pk), 'date': '2026-01-12', 'status': 'late'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Attendance.objects.get().status, 'late')
        self.assertEqual(Attendance.objects.get().marked_by, 'teacher')

    def test_parent_cannot_mark_attendance(self):
        self.client.force_login(self.parent)
        response = self.post_json(
            reverse('academics:attendance_mark'),
            {'student': str(self.child.pk), 'date': '2026-01-12', 'status': 'present'}
        )
        self.assertEqual(response.status_code, 403)

    def test_bulk_mark_with_shared_date(self):
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:attendance_bulk_mark'), {
            'date': '2026-01-12',
            'records': [
                {'student': str(self.child.pk), 'status': 'present'},
                {'student': str(self.other.pk), 'status': 'absent'},
            ],
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['created'], 2)
        self.assertEqual(Attendance.objects.filter(date=date(2026, 1, 12)).count(), 2)

    def test_bulk_mark_requires_list(self):
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:attendance_bulk_mark'), {'records': 'nope'})
        self.assertEqual(response.status_code, 400)

    def test_parent_sees_only_child_attendance(self):
        Attendance.objects.create(student=self.child, date=date(2026, 1, 12), status='present')
        Attendance.objects.create(student=self.other, date=date(2026, 1, 12), status='absent')

        self.client.force_login(self.parent)
        records = self.client.get(reverse('academics:attendance_list')).json()['attendance']
        self.assertEqual([record['student_name'] for record in records], ['Child One'])

        stats = self.client.get(reverse('academics:attendance_stats')).json()['stats']
        self.assertEqual(stats['total'], 1)

    # -------------------------------------------------------------------------
    # GRADES
    # -------------------------------------------------------------------------

    def test_teacher_records_grade(self):
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:grade_list'), self.grade_payload(self.child))
        self.assertEqual(response.status_code, 201)
        grade = response.json()['grade']
        self.assertEqual(grade['percentage'], 80.0)
        self.assertEqual(grade['test_type'], 'exam')
        self.assertTrue(grade['passed'])

    def test_unknown_subject_rejected(self):
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:grade_list'), self.grade_payload(self.child, subject='Astrology'))
        self.assertEqual(response.status_code, 400)
        self.assertIn('subject', response.json()['errors'])

    def test_score_above_max_rejected(self):
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:grade_list'), self.grade_payload(self.child, score=25))
        self.assertEqual(response.status_code, 400)
        self.assertIn('score', response.json()['errors'])

    def test_parent_cannot_record_grade(self):
        self.client.force_login(self.parent)
        response = self.post_json(reverse('academics:grade_list'), self.grade_payload(self.child))
        self.assertEqual(response.status_code, 403)

    def test_partial_grade_update(self):
        grade = Grade.objects.create(
            student=self.child, subject='Mathematics', test_name='Midterm',
            test_date=date(2026, 1, 20), score=Decimal('10'), max_score=Decimal('20'),
        )
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:grade_update', args=[grade.pk]), {'score': 18})
        self.assertEqual(response.status_code, 200)
        grade.refresh_from_db()
        self.assertEqual(grade.percentage, Decimal('90.00'))
        self.assertEqual(grade.test_name, 'Midterm')

    def test_parent_cannot_see_other_grades(self):
        grade = Grade.objects.create(
            student=self.other, subject='Physics', test_name='Quiz',
            test_date=date(2026, 1, 20), score=Decimal('5'), max_score=Decimal('10'),
        )
        self.client.force_login(self.parent)
        self.assertEqual(self.client.get(reverse('academics:grade_detail', args=[grade.pk])).status_code, 404)
        self.assertEqual(self.client.get(reverse('academics:grade_list')).json()['grades'], [])

    def test_grade_delete(self):
        grade = Grade.objects.create(
            student=self.other, subject='Physics', test_name='Quiz',
            test_date=date(2026, 1, 20), score=Decimal('5'), max_score=Decimal('10'),
        )
        self.client.force_login(self.teacher)
        response = self.post_json(reverse('academics:grade_delete', args=[grade.pk]), {})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Grade.objects.exists())

    def test_malformed_student_filter_is_400(self):
        self.client.force_login(self.teacher)
        for name in (
            'academics:attendance_list',
            'academics:attendance_stats',
            'academics:grade_list',
            'academics:grade_stats',
        ):
            with self.subTest(name=name):
                response = self.client.get(reverse(name), {'student': 'notauuid'})
                self.assertEqual(response.status_code, 400)
                self.assertFalse(response.json()['success'])
