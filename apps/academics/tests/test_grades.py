# academics/tests/test_grades.py

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from academics.models import Grade
from academics.stats import get_grade_statistics
from academics.utils import display_grade, gpa_points, letter_grade
from utils.tests.factories import make_config, make_student


def test_letter_grade_bands():
    assert letter_grade(Decimal('95')) == 'A'
    assert letter_grade(Decimal('90')) == 'A'
    assert letter_grade(Decimal('89.99')) == 'B'
    assert letter_grade(Decimal('60')) == 'D'
    assert letter_grade(Decimal('59.5')) == 'F'
    assert letter_grade(None) == 'F'


def test_display_grade_follows_scale():
    assert display_grade(Decimal('85'), 'percentage') == '85.00%'
    assert display_grade(Decimal('85'), 'letter') == 'B'
    assert display_grade(Decimal('85'), 'gpa') == '3.0'
    assert gpa_points(Decimal('10')) == Decimal('0.0')


def test_percentage_rounds_half_up():
    assert Grade.compute_percentage(Decimal('2'), Decimal('3')) == Decimal('66.67')
    assert Grade.compute_percentage(Decimal('1'), Decimal('8')) == Decimal('12.50')
    assert Grade.compute_percentage(Decimal('5'), Decimal('0')) == Decimal('0.00')


class GradeModelTests(TestCase):

    def setUp(self):
        self.student = make_student()

    def make_grade(self, score, max_score=Decimal('20'), subject='Mathematics'):
        return Grade.objects.create(
            student=self.student, subject=subject, test_name='Quiz 1',
            test_date=date(2026, 1, 15), score=score, max_score=max_score,
        )

    def test_percentage_is_derived_on_save(self):
        grade = self.make_grade(Decimal('15'))
        self.assertEqual(grade.percentage, Decimal('75.00'))

        grade.score = Decimal('10')
        grade.save(update_fields=['score'])
        grade.refresh_from_db()
        self.assertEqual(grade.percentage, Decimal('50.00'))

    def test_score_above_max_rejected(self):
        with self.assertRaises(ValidationError):
            self.make_grade(Decimal('21'))

    def test_to_dict_with_config(self):
        grade = self.make_grade(Decimal('9'))
        data = grade.to_dict(make_config(grading_scale='letter'))
        self.assertEqual(data['display_grade'], 'F')
        self.assertFalse(data['passed'])

    def test_grade_statistics(self):
        self.make_grade(Decimal('18'))
        self.make_grade(Decimal('8'))
        self.make_grade(Decimal('12'), subject='Physics')

        stats = get_grade_statistics(make_config())
        self.assertEqual(stats['total_grades'], 3)
        self.assertEqual(stats['average_score'], 12.7)
        self.assertEqual(stats['highest_score'], 18.0)
        self.assertEqual(stats['lowest_score'], 8.0)
        self.assertEqual(stats['passing_count'], 2)
        self.assertEqual(stats['passing_rate'], 66.7)

        maths = next(row for row in stats['by_subject'] if row['subject'] == 'Mathematics')
        self.assertEqual(maths['count'], 2)
        self.assertEqual(maths['average_percentage'], 65.0)

        stats = get_grade_statistics(make_config(), {'subject': 'Physics'})
        self.assertEqual(stats['total_grades'], 1)
