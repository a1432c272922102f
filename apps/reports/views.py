# reports/views.py

import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET

from accounts.decorators import role_required
from core.config import get_center_config
from fees.utils import BILLING_PERIOD_RE
from utils.utils import BadRequest, json_error, parse_date_value, parse_filters
from .exports import XLSX_CONTENT_TYPE, build_financial_workbook
from .reports import (
    get_attendance_report,
    get_financial_report,
    get_overview_report,
    get_student_performance_report,
    summarize_financial_report,
)

logger = logging.getLogger(__name__)


def _date_filters(request):
    """class_level, date_from, date_to; raises BadRequest on a bad date."""
    filters = parse_filters(request, ['class_level', 'date_from', 'date_to'])
    filters['date_from'] = parse_date_value(filters['date_from'], 'date_from')
    filters['date_to'] = parse_date_value(filters['date_to'], 'date_to')
    return filters


def _financial_filters(request):
    filters = parse_filters(request, ['class_level', 'period_from', 'period_to'])
    for key in ('period_from', 'period_to'):
        if filters[key] and not BILLING_PERIOD_RE.match(filters[key]):
            raise BadRequest(f"{key} must be in YYYY-MM format")
    return filters


# =============================================================================
# ACADEMIC REPORTS
# =============================================================================

@require_GET
@role_required('admin', 'teacher')
def overview_report(request):
    try:
        filters = _date_filters(request)
    except BadRequest as e:
        return json_error(str(e))

    return JsonResponse({"success": True, "overview": get_overview_report(filters)})


@require_GET
@role_required('admin', 'teacher')
def attendance_report(request):
    try:
        filters = _date_filters(request)
    except BadRequest as e:
        return json_error(str(e))

    return JsonResponse({"success": True, "report": get_attendance_report(filters)})


@require_GET
@role_required('admin', 'teacher')
def student_performance_report(request):
    try:
        filters = _date_filters(request)
    except BadRequest as e:
        return json_error(str(e))

    return JsonResponse({"success": True, "report": get_student_performance_report(filters)})


# =============================================================================
# FINANCIAL REPORTS
# =============================================================================

@require_GET
@role_required('admin')
def financial_report(request):
    try:
        filters = _financial_filters(request)
    except BadRequest as e:
        return json_error(str(e))

    report = get_financial_report(filters)
    return JsonResponse({
        "success": True,
        "report": report,
        "summary": summarize_financial_report(report),
        "currency": get_center_config(request.user).currency,
    })


@require_GET
@role_required('admin')
def financial_report_export(request):
    try:
        filters = _financial_filters(request)
    except BadRequest as e:
        return json_error(str(e))

    config = get_center_config(request.user)
    content = build_financial_workbook(get_financial_report(filters), config, filters)

    response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = 'attachment; filename="financial_report.xlsx"'

    logger.info(f"Financial report exported by {request.user.username}")
    return response
