# fees/stats.py

"""
Statistics for billing records and payment entries.
"""

from datetime import date
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import Coalesce, TruncMonth
import logging

from core.utils import calculate_percentage, get_center_today

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def _shift_month(day, months):
    """First day of the month `months` away from `day`'s month."""
    month_index = day.year * 12 + (day.month - 1) + months
    return date(month_index // 12, month_index % 12 + 1, 1)


def get_payment_statistics(filters=None, students=None):
    """
    Get payment statistics

    Args:
        filters (dict): Optional filters
            - billing_period: 'YYYY-MM'
            - class_level: class level at billing time
            - status: pending | partial | paid
            - student: student id
        students (QuerySet): Optional student scope (a parent's children)

    Returns:
        dict: record counts per status, billed / collected / outstanding
        totals, collection rate, payment method breakdown and the amounts
        collected in each of the last 6 months
    """
    from .models import BillingRecord, PaymentEntry

    records = BillingRecord.objects.all()
    if students is not None:
        records = records.filter(student__in=students)

    # Apply filters
    if filters:
        if filters.get('billing_period'):
            records = records.filter(billing_period=filters['billing_period'])
        if filters.get('class_level'):
            records = records.filter(class_level=filters['class_level'])
        if filters.get('status'):
            records = records.filter(status=filters['status'])
        if filters.get('student'):
            records = records.filter(student_id=filters['student'])

    totals = records.aggregate(
        total_records=Count('id'),
        total_billed=Coalesce(Sum('total_amount'), ZERO),
        total_collected=Coalesce(Sum('amount_paid'), ZERO),
        outstanding=Coalesce(Sum('balance'), ZERO),
        pending=Count('id', filter=Q(status=BillingRecord.STATUS_PENDING)),
        partial=Count('id', filter=Q(status=BillingRecord.STATUS_PARTIAL)),
        paid=Count('id', filter=Q(status=BillingRecord.STATUS_PAID)),
    )

    stats = {
        'total_records': totals['total_records'],
        'total_billed': float(totals['total_billed']),
        'total_collected': float(totals['total_collected']),
        'outstanding_balance': float(totals['outstanding']),
        'by_status': {
            'pending': totals['pending'],
            'partial': totals['partial'],
            'paid': totals['paid'],
        },
        'collection_rate': float(
            calculate_percentage(totals['total_collected'], totals['total_billed'], 1)
        ),
    }

    # Payment method breakdown
    entries = PaymentEntry.objects.filter(record__in=records)
    total_entries = entries.count()

    method_labels = dict(PaymentEntry.PAYMENT_METHOD_CHOICES)
    method_stats = entries.values('payment_method').annotate(
        count=Count('id'),
        total_amount=Coalesce(Sum('amount'), ZERO),
    ).order_by('-total_amount')

    stats['by_payment_method'] = [
        {
            'method': item['payment_method'],
            'label': method_labels.get(item['payment_method'], item['payment_method']),
            'count': item['count'],
            'total_amount': float(item['total_amount']),
            'percentage': round(
                (item['count'] / total_entries * 100) if total_entries > 0 else 0,
                2
            ),
        }
        for item in method_stats
    ]

    # Collections over the last 6 months, including empty months
    today = get_center_today()
    start = _shift_month(today, -5)
    monthly = {
        row['month'].strftime('%Y-%m'): row['total']
        for row in entries.filter(payment_date__gte=start)
        .annotate(month=TruncMonth('payment_date'))
        .values('month')
        .annotate(total=Coalesce(Sum('amount'), ZERO))
        .order_by('month')
    }
    stats['monthly_collections'] = [
        {
            'month': _shift_month(today, offset).strftime('%Y-%m'),
            'total': float(monthly.get(_shift_month(today, offset).strftime('%Y-%m'), ZERO)),
        }
        for offset in range(-5, 1)
    ]

    return stats
