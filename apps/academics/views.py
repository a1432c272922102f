# academics/views.py

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import api_login_required, role_required
from core.config import get_center_config
from students.models import Student
from utils.utils import (
    BadRequest,
    json_error,
    merge_instance_data,
    paginate_queryset,
    pagination_payload,
    parse_date_value,
    parse_filters,
    parse_json_body,
    parse_uuid,
    validation_messages,
)
from .forms import AttendanceMarkForm, GradeForm
from .models import Attendance, Grade
from .services import AttendanceService
from .stats import get_attendance_statistics, get_grade_statistics

logger = logging.getLogger(__name__)


def _visible_students(request):
    return Student.objects.visible_to(request.profile)


# =============================================================================
# ATTENDANCE
# =============================================================================

@require_GET
@api_login_required
def attendance_list(request):
    """
    Attendance records visible to the current user.

    Filters: date, date_from, date_to, class_level, student, status
    """
    filters = parse_filters(request, ['date', 'date_from', 'date_to', 'class_level', 'student', 'status'])

    try:
        exact_date = parse_date_value(filters['date'], 'date')
        filters['student'] = parse_uuid(filters['student'], 'student')
        date_from = parse_date_value(filters['date_from'], 'date_from')
        date_to = parse_date_value(filters['date_to'], 'date_to')
    except BadRequest as e:
        return json_error(str(e))

    records = Attendance.objects.filter(student__in=_visible_students(request)).select_related('student')
    if exact_date:
        records = records.filter(date=exact_date)
    if date_from:
        records = records.filter(date__gte=date_from)
    if date_to:
        records = records.filter(date__lte=date_to)
    if filters['class_level']:
        records = records.filter(student__class_level=filters['class_level'])
    if filters['student']:
        records = records.filter(student_id=filters['student'])
    if filters['status']:
        records = records.filter(status=filters['status'])

    page_obj, paginator = paginate_queryset(request, records, per_page=50)

    return JsonResponse({
        "success": True,
        "attendance": [record.to_dict() for record in page_obj],
        "pagination": pagination_payload(page_obj, paginator),
    })


@csrf_exempt
@require_POST
@role_required('admin', 'teacher')
def attendance_mark(request):
    """Body: {"student": "<uuid>", "date": "YYYY-MM-DD", "status": "present", "notes": ""}"""
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    form = AttendanceMarkForm(data)
    if not form.is_valid():
        return json_error("Invalid attendance data", errors=form.errors.get_json_data())

    attendance, created = AttendanceService.mark_attendance(
        form.cleaned_data['student'],
        form.cleaned_data['date'],
        form.cleaned_data['status'],
        marked_by=request.user.username,
        notes=form.cleaned_data.get('notes', ''),
    )

    return JsonResponse(
        {"success": True, "created": created, "attendance": attendance.to_dict()},
        status=201 if created else 200
    )


@csrf_exempt
@require_POST
@role_required('admin', 'teacher')
def attendance_bulk_mark(request):
    """
    Body: {"date": "YYYY-MM-DD", "records": [{"student": "<uuid>", "status": "present"}, ...]}

    A top-level date applies to every record that does not carry its own.
    """
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    records = data.get('records')
    if not isinstance(records, list):
        return json_error("records must be a list")

    default_date = data.get('date')
    if default_date:
        records = [
            {**record, 'date': record.get('date') or default_date} if isinstance(record, dict) else record
            for record in records
        ]

    try:
        result = AttendanceService.bulk_mark_attendance(records, marked_by=request.user.username)
    except ValidationError as e:
        return json_error("Invalid attendance data", errors=validation_messages(e))

    return JsonResponse({
        "success": True,
        "created": result['created'],
        "updated": result['updated'],
        "attendance": [record.to_dict() for record in result['records']],
    })


@require_GET
@api_login_required
def attendance_stats(request):
    filters = parse_filters(request, ['student', 'class_level', 'date_from', 'date_to'])
    try:
        filters['student'] = parse_uuid(filters['student'], 'student')
        filters['date_from'] = parse_date_value(filters['date_from'], 'date_from')
        filters['date_to'] = parse_date_value(filters['date_to'], 'date_to')
    except BadRequest as e:
        return json_error(str(e))

    stats = get_attendance_statistics(filters, students=_visible_students(request))
    return JsonResponse({"success": True, "stats": stats})


# =============================================================================
# GRADES
# =============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_login_required
def grade_list(request):
    """
    GET: grades visible to the current user (filters: student, subject, test_type, class_level).
    POST: record a grade (admin / teacher).
    """
    config = get_center_config(request.user)

    if request.method == 'POST':
        if not request.profile.can_manage_academics():
            return json_error("You do not have permission to record grades", status=403)
        return _create_grade(request, config)

    filters = parse_filters(request, ['student', 'subject', 'test_type', 'class_level'])
    try:
        filters['student'] = parse_uuid(filters['student'], 'student')
    except BadRequest as e:
        return json_error(str(e))

    grades = Grade.objects.filter(student__in=_visible_students(request)).select_related('student')
    if filters['student']:
        grades = grades.filter(student_id=filters['student'])
    if filters['subject']:
        grades = grades.filter(subject=filters['subject'])
    if filters['test_type']:
        grades = grades.filter(test_type=filters['test_type'])
    if filters['class_level']:
        grades = grades.filter(student__class_level=filters['class_level'])

    page_obj, paginator = paginate_queryset(request, grades, per_page=50)

    return JsonResponse({
        "success": True,
        "grades": [grade.to_dict(config) for grade in page_obj],
        "pagination": pagination_payload(page_obj, paginator),
    })


def _create_grade(request, config):
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    form = GradeForm(data, config=config)
    if not form.is_valid():
        return json_error("Invalid grade data", errors=form.errors.get_json_data())

    with transaction.atomic():
        grade = form.save()

    logger.info(
        f"Grade recorded for {grade.student.full_name}: {grade.subject} "
        f"{grade.score}/{grade.max_score} by {request.user.username}"
    )
    return JsonResponse({"success": True, "grade": grade.to_dict(config)}, status=201)


@require_GET
@api_login_required
def grade_detail(request, grade_id):
    try:
        grade = Grade.objects.select_related('student').get(
            pk=grade_id, student__in=_visible_students(request)
        )
    except Grade.DoesNotExist:
        return json_error("Grade not found", status=404)

    return JsonResponse({"success": True, "grade": grade.to_dict(get_center_config(request.user))})


@csrf_exempt
@require_POST
@role_required('admin', 'teacher')
def grade_update(request, grade_id):
    try:
        grade = Grade.objects.get(pk=grade_id)
        payload = parse_json_body(request)
    except Grade.DoesNotExist:
        return json_error("Grade not found", status=404)
    except BadRequest as e:
        return json_error(str(e))

    config = get_center_config(request.user)
    data = merge_instance_data(grade, GradeForm.Meta.fields, payload)
    form = GradeForm(data, instance=grade, config=config)
    if not form.is_valid():
        return json_error("Invalid grade data", errors=form.errors.get_json_data())

    with transaction.atomic():
        grade = form.save()

    logger.info(f"Grade {grade.pk} updated by {request.user.username}")
    return JsonResponse({"success": True, "grade": grade.to_dict(config)})


@csrf_exempt
@require_POST
@role_required('admin', 'teacher')
def grade_delete(request, grade_id):
    try:
        grade = Grade.objects.get(pk=grade_id)
    except Grade.DoesNotExist:
        return json_error("Grade not found", status=404)

    grade.delete()
    logger.info(f"Grade {grade_id} deleted by {request.user.username}")
    return JsonResponse({"success": True, "message": "Grade deleted"})


@require_GET
@api_login_required
def grade_stats(request):
    filters = parse_filters(request, ['student', 'subject', 'test_type', 'class_level'])
    try:
        filters['student'] = parse_uuid(filters['student'], 'student')
    except BadRequest as e:
        return json_error(str(e))

    stats = get_grade_statistics(
        get_center_config(request.user),
        filters,
        students=_visible_students(request),
    )
    return JsonResponse({"success": True, "stats": stats})
