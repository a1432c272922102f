# utils/tests/test_admin.py

from decimal import Decimal

from django.contrib.auth.models import User
from django.test import TestCase
from django.urls import reverse

from accounts.models import get_user_profile
from core.config import CenterConfig
from fees.services import BillingService
from utils.tests.factories import make_student


class AdminSmokeTests(TestCase):

    def setUp(self):
        self.superuser = User.objects.create_superuser('root', 'root@example.com', 'pass12345')
        get_user_profile(self.superuser)
        student = make_student()
        self.record, self.entry = BillingService.record_payment(
            student, '2026-01', Decimal('20000'),
            {'amount': '5000', 'payment_method': 'cash', 'payment_date': '2026-01-05'},
            CenterConfig(), received_by='root',
        )
        self.client.force_login(self.superuser)

    def test_changelists_load(self):
        for name in (
            'admin:auth_user_changelist',
            'admin:accounts_userprofile_changelist',
            'admin:core_centersettings_changelist',
            'admin:students_student_changelist',
            'admin:academics_attendance_changelist',
            'admin:academics_grade_changelist',
            'admin:fees_billingrecord_changelist',
            'admin:fees_paymententry_changelist',
        ):
            with self.subTest(name=name):
                self.assertEqual(self.client.get(reverse(name)).status_code, 200)

    def test_billing_record_change_page(self):
        response = self.client.get(reverse('admin:fees_billingrecord_change', args=[self.record.pk]))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, self.entry.receipt_number)

    def test_payment_entries_cannot_be_added(self):
        response = self.client.get(reverse('admin:fees_paymententry_add'))
        self.assertEqual(response.status_code, 403)
