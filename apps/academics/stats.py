# academics/stats.py
"""
Statistics for attendance and grades.

Every function accepts an optional base queryset of students, so views
can pass a parent's children and get the same figures scoped to them.
"""

from decimal import Decimal

from django.db.models import Avg, Count, Max, Min, Q
import logging

from core.utils import calculate_percentage

logger = logging.getLogger(__name__)


def _round(value, places=1):
    if value is None:
        return 0.0
    return round(float(value), places)


# =============================================================================
# ATTENDANCE STATISTICS
# =============================================================================

def get_attendance_statistics(filters=None, students=None):
    """
    Attendance totals per status and the attendance rate.

    Args:
        filters (dict): Optional filters to apply
            - student: student id
            - class_level: class level name
            - date_from / date_to: inclusive date range
        students (QuerySet): Optional student scope

    Returns:
        dict: total, present, absent, late, excused, attendance_rate
    """
    from .models import Attendance

    records = Attendance.objects.all()
    if students is not None:
        records = records.filter(student__in=students)

    if filters:
        if filters.get('student'):
            records = records.filter(student_id=filters['student'])
        if filters.get('class_level'):
            records = records.filter(student__class_level=filters['class_level'])
        if filters.get('date_from'):
            records = records.filter(date__gte=filters['date_from'])
        if filters.get('date_to'):
            records = records.filter(date__lte=filters['date_to'])

    totals = records.aggregate(
        total=Count('id'),
        present=Count('id', filter=Q(status='present')),
        absent=Count('id', filter=Q(status='absent')),
        late=Count('id', filter=Q(status='late')),
        excused=Count('id', filter=Q(status='excused')),
    )

    totals['attendance_rate'] = float(calculate_percentage(totals['present'], totals['total'], 1))
    return totals


# =============================================================================
# GRADE STATISTICS
# =============================================================================

def get_grade_statistics(config, filters=None, students=None):
    """
    Grade summary and per-subject breakdown.

    Args:
        config (CenterConfig): passing grade comes from here
        filters (dict): Optional filters
            - student: student id
            - subject: subject name
            - test_type: quiz | exam | homework | assignment
            - class_level: class level name
        students (QuerySet): Optional student scope

    Returns:
        dict: Statistics including averages, passing rate and by_subject list
    """
    from .models import Grade

    grades = Grade.objects.all()
    if students is not None:
        grades = grades.filter(student__in=students)

    if filters:
        if filters.get('student'):
            grades = grades.filter(student_id=filters['student'])
        if filters.get('subject'):
            grades = grades.filter(subject=filters['subject'])
        if filters.get('test_type'):
            grades = grades.filter(test_type=filters['test_type'])
        if filters.get('class_level'):
            grades = grades.filter(student__class_level=filters['class_level'])

    passing_grade = Decimal(str(config.passing_grade))

    summary = grades.aggregate(
        total=Count('id'),
        average_score=Avg('score'),
        average_percentage=Avg('percentage'),
        highest_score=Max('score'),
        lowest_score=Min('score'),
        passing=Count('id', filter=Q(percentage__gte=passing_grade)),
    )

    by_subject = [
        {
            'subject': row['subject'],
            'count': row['count'],
            'average_score': _round(row['average_score']),
            'average_percentage': _round(row['average_percentage']),
            'highest_score': _round(row['highest_score'], 2),
            'lowest_score': _round(row['lowest_score'], 2),
        }
        for row in grades.values('subject')
        .annotate(
            count=Count('id'),
            average_score=Avg('score'),
            average_percentage=Avg('percentage'),
            highest_score=Max('score'),
            lowest_score=Min('score'),
        )
        .order_by('subject')
    ]

    return {
        'total_grades': summary['total'],
        'average_score': _round(summary['average_score']),
        'average_percentage': _round(summary['average_percentage']),
        'highest_score': _round(summary['highest_score'], 2),
        'lowest_score': _round(summary['lowest_score'], 2),
        'passing_count': summary['passing'],
        'passing_rate': float(calculate_percentage(summary['passing'], summary['total'], 1)),
        'passing_grade': float(passing_grade),
        'by_subject': by_subject,
    }
