# reports/reports.py

"""
Report builders for the admin dashboard.

- Overview: student, grade, attendance and billing counts
- Attendance: per-student attendance with a rating
- Student performance: per-student averages with a subject breakdown
- Financial: per-student billed / paid / balance from the billing records

Each builder returns plain dicts/lists ready for JsonResponse or export.
"""

from decimal import Decimal

from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import Coalesce
import logging

from academics.models import Attendance, Grade
from core.utils import calculate_percentage
from fees.models import BillingRecord
from fees.services import PaymentLedger
from students.models import Student

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

# (minimum rate, rating), checked top-down
ATTENDANCE_RATINGS = [
    (90, 'excellent'),
    (75, 'good'),
    (60, 'average'),
]

PERFORMANCE_LEVELS = [
    (80, 'excellent'),
    (70, 'good'),
    (50, 'average'),
]


def attendance_rating(rate):
    for minimum, rating in ATTENDANCE_RATINGS:
        if rate >= minimum:
            return rating
    return 'poor'


def performance_level(average_percentage):
    for minimum, level in PERFORMANCE_LEVELS:
        if average_percentage >= minimum:
            return level
    return 'needs_improvement'


def _report_students(filters):
    students = Student.objects.active()
    if filters and filters.get('class_level'):
        students = students.filter(class_level=filters['class_level'])
    return students.order_by('class_level', 'last_name', 'first_name')


def _student_payload(student):
    return {
        'id': str(student.id),
        'first_name': student.first_name,
        'last_name': student.last_name,
        'full_name': student.full_name,
        'class_level': student.class_level,
    }


def _date_range(prefix, filters):
    """Q for an inclusive date_from / date_to range on `prefix`."""
    condition = Q()
    if filters:
        if filters.get('date_from'):
            condition &= Q(**{f'{prefix}__gte': filters['date_from']})
        if filters.get('date_to'):
            condition &= Q(**{f'{prefix}__lte': filters['date_to']})
    return condition


# =============================================================================
# OVERVIEW
# =============================================================================

def get_overview_report(filters=None):
    """
    Headline counts.

    Args:
        filters (dict): date_from / date_to limit the grade (test date)
            and attendance (date) counts

    Returns:
        dict
    """
    student_counts = Student.objects.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status='active')),
    )
    billing = BillingRecord.objects.aggregate(
        total_records=Count('id'),
        outstanding=Coalesce(Sum('balance'), ZERO),
        unpaid=Count('id', filter=~Q(status=BillingRecord.STATUS_PAID)),
    )

    return {
        'total_students': student_counts['total'],
        'active_students': student_counts['active'],
        'inactive_students': student_counts['total'] - student_counts['active'],
        'total_grades': Grade.objects.filter(_date_range('test_date', filters)).count(),
        'total_attendance': Attendance.objects.filter(_date_range('date', filters)).count(),
        'billing_records': billing['total_records'],
        'unpaid_billing_records': billing['unpaid'],
        'outstanding_balance': float(billing['outstanding']),
    }


# =============================================================================
# ATTENDANCE REPORT
# =============================================================================

def get_attendance_report(filters=None):
    """
    Attendance per active student.

    Args:
        filters (dict): class_level, date_from, date_to

    Returns:
        list of dicts with total_days, present/absent/late/excused days,
        attendance_rate (present / total, one decimal) and rating
    """
    in_range = _date_range('attendance_records__date', filters)

    students = _report_students(filters).annotate(
        total_days=Count('attendance_records', filter=in_range),
        present_days=Count('attendance_records', filter=in_range & Q(attendance_records__status='present')),
        absent_days=Count('attendance_records', filter=in_range & Q(attendance_records__status='absent')),
        late_days=Count('attendance_records', filter=in_range & Q(attendance_records__status='late')),
        excused_days=Count('attendance_records', filter=in_range & Q(attendance_records__status='excused')),
    )

    report = []
    for student in students:
        rate = float(calculate_percentage(student.present_days, student.total_days, 1))
        report.append({
            'student': _student_payload(student),
            'total_days': student.total_days,
            'present_days': student.present_days,
            'absent_days': student.absent_days,
            'late_days': student.late_days,
            'excused_days': student.excused_days,
            'attendance_rate': rate,
            'rating': attendance_rating(rate),
        })

    logger.debug(f"Attendance report generated for {len(report)} students")
    return report


# =============================================================================
# STUDENT PERFORMANCE REPORT
# =============================================================================

def get_student_performance_report(filters=None):
    """
    Grade performance per active student.

    Args:
        filters (dict): class_level, date_from, date_to (test date)

    Returns:
        list of dicts with total_grades, average_percentage, a
        subject_breakdown {subject: {count, average}} and a performance level
    """
    students = list(_report_students(filters))

    grades = Grade.objects.filter(student__in=students).filter(_date_range('test_date', filters))

    breakdown = {}
    for row in grades.values('student_id', 'subject').annotate(
        count=Count('id'), average=Avg('percentage')
    ).order_by('subject'):
        breakdown.setdefault(row['student_id'], {})[row['subject']] = {
            'count': row['count'],
            'average': round(float(row['average']), 1),
        }

    overall = {
        row['student_id']: row
        for row in grades.values('student_id').annotate(count=Count('id'), average=Avg('percentage'))
    }

    report = []
    for student in students:
        summary = overall.get(student.id)
        average = round(float(summary['average']), 1) if summary else 0.0
        report.append({
            'student': _student_payload(student),
            'total_grades': summary['count'] if summary else 0,
            'average_percentage': average,
            'subject_breakdown': breakdown.get(student.id, {}),
            'performance': performance_level(average),
        })

    return report


# =============================================================================
# FINANCIAL REPORT
# =============================================================================

def get_financial_report(filters=None):
    """
    Billed, paid and outstanding amounts per active student.

    Args:
        filters (dict): class_level, period_from / period_to ('YYYY-MM',
            inclusive)

    Returns:
        list of dicts. status is derived from the totals with the same
        rules as a single billing record.
    """
    period = Q()
    if filters:
        if filters.get('period_from'):
            period &= Q(billing_records__billing_period__gte=filters['period_from'])
        if filters.get('period_to'):
            period &= Q(billing_records__billing_period__lte=filters['period_to'])

    students = _report_students(filters).annotate(
        record_count=Count('billing_records', filter=period),
        billed=Coalesce(Sum('billing_records__total_amount', filter=period), ZERO),
        paid=Coalesce(Sum('billing_records__amount_paid', filter=period), ZERO),
        outstanding=Coalesce(Sum('billing_records__balance', filter=period), ZERO),
    )

    report = []
    for student in students:
        summary = PaymentLedger.reconcile(student.billed, [student.paid] if student.paid else [])
        report.append({
            'student': _student_payload(student),
            'billing_records': student.record_count,
            'total_billed': float(student.billed),
            'total_paid': float(student.paid),
            'balance': float(student.outstanding),
            'status': summary.status,
            'parent_contact': student.parent_phone or 'N/A',
        })

    return report


def summarize_financial_report(report):
    """Column totals for a financial report."""
    billed = sum(Decimal(str(row['total_billed'])) for row in report)
    paid = sum(Decimal(str(row['total_paid'])) for row in report)
    balance = sum(Decimal(str(row['balance'])) for row in report)
    return {
        'students': len(report),
        'total_billed': float(billed),
        'total_paid': float(paid),
        'balance': float(balance),
        'collection_rate': float(calculate_percentage(paid, billed, 1)),
    }
