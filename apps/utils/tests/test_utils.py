# utils/tests/test_utils.py

from datetime import date
import json

import pytest
from django.test import RequestFactory, TestCase

from accounts.models import UserProfile
from students.models import Student
from utils.context import RequestContext, get_client_ip, get_request_context
from utils.tests.factories import make_student, make_user
from utils.utils import (
    BadRequest,
    merge_instance_data,
    parse_date_value,
    parse_filters,
    parse_json_body,
    parse_uuid,
)


def test_parse_filters_treats_all_as_empty():
    request = RequestFactory().get('/', {'status': 'all', 'q': ' amina ', 'role': ''})
    assert parse_filters(request, ['status', 'q', 'role']) == {'status': None, 'q': 'amina', 'role': None}


def test_parse_json_body():
    factory = RequestFactory()
    assert parse_json_body(factory.post('/', data='', content_type='application/json')) == {}
    assert parse_json_body(
        factory.post('/', data=json.dumps({'a': 1}), content_type='application/json')
    ) == {'a': 1}
    with pytest.raises(BadRequest):
        parse_json_body(factory.post('/', data='[1, 2]', content_type='application/json'))
    with pytest.raises(BadRequest):
        parse_json_body(factory.post('/', data='{oops', content_type='application/json'))


def test_parse_date_value():
    assert parse_date_value('2026-02-03') == date(2026, 2, 3)
    assert parse_date_value('2026-02-03T10:00:00') == date(2026, 2, 3)
    assert parse_date_value('', default=date(2026, 1, 1)) == date(2026, 1, 1)
    with pytest.raises(BadRequest):
        parse_date_value('03/02/2026')
    with pytest.raises(BadRequest):
        parse_date_value('2026-02-30')


def test_parse_uuid():
    value = '12345678-1234-5678-1234-567812345678'
    assert str(parse_uuid(value)) == value
    assert parse_uuid('') is None
    with pytest.raises(BadRequest):
        parse_uuid('notauuid', 'student')


def test_client_ip_prefers_forwarded_header():
    request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='10.0.0.1, 10.0.0.2', REMOTE_ADDR='127.0.0.1')
    assert get_client_ip(request) == '10.0.0.1'
    assert get_client_ip(RequestFactory().get('/', REMOTE_ADDR='127.0.0.2')) == '127.0.0.2'


class AuditFieldTests(TestCase):

    def test_request_context_stamps_audit_fields(self):
        admin = make_user('admin', role=UserProfile.ROLE_ADMIN)
        with RequestContext(user=admin, ip_address='192.168.1.5'):
            student = make_student()
        self.assertIsNone(get_request_context())

        student.refresh_from_db()
        self.assertEqual(student.created_by_id, str(admin.pk))
        self.assertEqual(student.updated_by_id, str(admin.pk))
        self.assertEqual(student.created_from_ip, '192.168.1.5')
        self.assertIsNotNone(student.created_at)
        self.assertEqual(student.get_created_by(), admin)
        self.assertEqual(student.get_updated_by(), admin)

        student.set_change_reason("Moved to the evening group").save()
        student.refresh_from_db()
        self.assertEqual(student.change_reason, "Moved to the evening group")
        self.assertEqual(student.get_updated_by(), admin)

    def test_no_context_leaves_fields_empty(self):
        student = make_student()
        self.assertIsNone(student.created_by_id)
        self.assertEqual(student.created_at, student.updated_at)

    def test_merge_instance_data_keeps_unsent_fields(self):
        student = make_student(parent_name='Marie Ngo')
        data = merge_instance_data(student, ['first_name', 'parent_name'], {'first_name': 'Awa', 'extra': 1})
        self.assertEqual(data, {'first_name': 'Awa', 'parent_name': 'Marie Ngo'})
        self.assertEqual(Student.objects.count(), 1)
