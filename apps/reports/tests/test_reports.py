# reports/tests/test_reports.py

from datetime import date
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from django.urls import reverse
from openpyxl import load_workbook

from academics.models import Attendance, Grade
from accounts.models import UserProfile
from fees.services import BillingService
from reports.reports import (
    attendance_rating,
    get_attendance_report,
    get_financial_report,
    get_overview_report,
    get_student_performance_report,
    performance_level,
)
from utils.tests.factories import make_config, make_student, make_user


def test_attendance_rating_thresholds():
    assert attendance_rating(100) == 'excellent'
    assert attendance_rating(90) == 'excellent'
    assert attendance_rating(89.9) == 'good'
    assert attendance_rating(75) == 'good'
    assert attendance_rating(60) == 'average'
    assert attendance_rating(59.9) == 'poor'
    assert attendance_rating(0) == 'poor'


def test_performance_levels():
    assert performance_level(80) == 'excellent'
    assert performance_level(70) == 'good'
    assert performance_level(50) == 'average'
    assert performance_level(49.9) == 'needs_improvement'


class ReportTests(TestCase):

    def setUp(self):
        self.config = make_config()
        self.amina = make_student('Amina', 'Njoya', class_level='Form 1', parent_phone='677000111')
        self.paul = make_student('Paul', 'Biya', class_level='Form 2')
        make_student('Gone', 'Away', status='inactive')

        for day, status in [(1, 'present'), (2, 'present'), (3, 'present'), (4, 'absent')]:
            Attendance.objects.create(student=self.amina, date=date(2026, 1, day), status=status)
        Attendance.objects.create(student=self.paul, date=date(2026, 1, 1), status='late')

        Grade.objects.create(
            student=self.amina, subject='Mathematics', test_name='T1',
            test_date=date(2026, 1, 10), score=Decimal('18'), max_score=Decimal('20')
        )
        Grade.objects.create(
            student=self.amina, subject='Physics', test_name='T1',
            test_date=date(2026, 1, 11), score=Decimal('14'), max_score=Decimal('20')
        )

        record = BillingService.create_billing_record(self.amina, '2026-01', Decimal('20000'), self.config)
        BillingService.add_payment(record.pk, {'amount': '5000', 'payment_date': '2026-01-05'}, self.config, 'a')
        BillingService.create_billing_record(self.amina, '2026-02', Decimal('20000'), self.config)

    def by_name(self, report):
        return {row['student']['full_name']: row for row in report}

    def test_overview(self):
        overview = get_overview_report({'date_from': date(2026, 1, 2), 'date_to': None})
        self.assertEqual(overview['total_students'], 3)
        self.assertEqual(overview['active_students'], 2)
        self.assertEqual(overview['inactive_students'], 1)
        self.assertEqual(overview['total_attendance'], 3)
        self.assertEqual(overview['total_grades'], 2)
        self.assertEqual(overview['billing_records'], 2)
        self.assertEqual(overview['outstanding_balance'], 35000.0)

    def test_attendance_report(self):
        report = self.by_name(get_attendance_report())
        self.assertEqual(set(report), {'Amina Njoya', 'Paul Biya'})

        amina = report['Amina Njoya']
        self.assertEqual(amina['total_days'], 4)
        self.assertEqual(amina['present_days'], 3)
        self.assertEqual(amina['attendance_rate'], 75.0)
        self.assertEqual(amina['rating'], 'good')

        self.assertEqual(report['Paul Biya']['late_days'], 1)
        self.assertEqual(report['Paul Biya']['rating'], 'poor')

    def test_attendance_report_filters(self):
        report = get_attendance_report({'class_level': 'Form 1', 'date_to': date(2026, 1, 3)})
        self.assertEqual(len(report), 1)
        self.assertEqual(report[0]['attendance_rate'], 100.0)
        self.assertEqual(report[0]['rating'], 'excellent')

    def test_student_performance_report(self):
        report = self.by_name(get_student_performance_report())
        amina = report['Amina Njoya']
        self.assertEqual(amina['total_grades'], 2)
        self.assertEqual(amina['average_percentage'], 80.0)
        self.assertEqual(amina['performance'], 'excellent')
        self.assertEqual(amina['subject_breakdown']['Mathematics'], {'count': 1, 'average': 90.0})

        paul = report['Paul Biya']
        self.assertEqual(paul['total_grades'], 0)
        self.assertEqual(paul['performance'], 'needs_improvement')

    def test_financial_report_uses_billing_records(self):
        report = self.by_name(get_financial_report())
        amina = report['Amina Njoya']
        self.assertEqual(amina['billing_records'], 2)
        self.assertEqual(amina['total_billed'], 40000.0)
        self.assertEqual(amina['total_paid'], 5000.0)
        self.assertEqual(amina['balance'], 35000.0)
        self.assertEqual(amina['status'], 'partial')
        self.assertEqual(amina['parent_contact'], '677000111')

        paul = report['Paul Biya']
        self.assertEqual(paul['total_billed'], 0.0)
        self.assertEqual(paul['status'], 'pending')
        self.assertEqual(paul['parent_contact'], 'N/A')

    def test_financial_report_period_filter(self):
        report = self.by_name(get_financial_report({'period_from': '2026-02', 'period_to': '2026-02'}))
        amina = report['Amina Njoya']
        self.assertEqual(amina['billing_records'], 1)
        self.assertEqual(amina['total_paid'], 0.0)
        self.assertEqual(amina['status'], 'pending')


class ReportViewTests(TestCase):

    def setUp(self):
        self.admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        self.teacher = make_user('teacher')
        self.parent = make_user('parent', role=UserProfile.ROLE_PARENT)
        student = make_student()
        BillingService.create_billing_record(student, '2026-01', Decimal('20000'), make_config())

    def test_permissions(self):
        self.assertEqual(self.client.get(reverse('reports:overview')).status_code, 401)

        self.client.force_login(self.parent)
        self.assertEqual(self.client.get(reverse('reports:overview')).status_code, 403)

        self.client.force_login(self.teacher)
        self.assertEqual(self.client.get(reverse('reports:attendance')).status_code, 200)
        self.assertEqual(self.client.get(reverse('reports:financial')).status_code, 403)

    def test_bad_date_is_400(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('reports:overview'), {'date_from': 'yesterday'})
        self.assertEqual(response.status_code, 400)

    def test_bad_period_is_400(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('reports:financial'), {'period_from': '2026/01'})
        self.assertEqual(response.status_code, 400)

    def test_financial_report(self):
        self.client.force_login(self.admin)
        data = self.client.get(reverse('reports:financial')).json()
        self.assertEqual(data['summary']['total_billed'], 20000.0)
        self.assertEqual(data['summary']['collection_rate'], 0.0)
        self.assertEqual(data['currency'], 'FCFA')

    def test_financial_export(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('reports:financial_export'), {'class_level': 'Form 1'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('financial_report.xlsx', response['Content-Disposition'])

        sheet = load_workbook(BytesIO(response.content)).active
        self.assertEqual(sheet['A1'].value, 'Tutorial Center - Financial Report')
        self.assertEqual(sheet['B4'].value, 'Student')
        self.assertEqual(sheet['B5'].value, 'Amina Njoya')
        self.assertEqual(sheet['E5'].value, 20000)
        self.assertIn('Class: Form 1', sheet['A2'].value)
