# students/views.py

import logging

from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import api_login_required, role_required
from core.config import get_center_config
from utils.utils import (
    BadRequest,
    json_error,
    merge_instance_data,
    paginate_queryset,
    pagination_payload,
    parse_filters,
    parse_json_body,
)
from .forms import StudentForm
from .models import Student

logger = logging.getLogger(__name__)


def _get_visible_student(request, student_id):
    return Student.objects.visible_to(request.profile).get(pk=student_id)


# =============================================================================
# STUDENT LIST / CREATE
# =============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_login_required
def student_list(request):
    """
    GET: search and filter students visible to the current user.
    POST: create a student (admin only).
    """
    if request.method == 'POST':
        return _create_student(request)

    filters = parse_filters(request, ['q', 'class_level', 'status', 'gender'])

    students = Student.objects.visible_to(request.profile).search(filters['q'])
    if filters['class_level']:
        students = students.filter(class_level=filters['class_level'])
    if filters['status']:
        students = students.filter(status=filters['status'])
    if filters['gender']:
        students = students.filter(gender=filters['gender'])

    page_obj, paginator = paginate_queryset(request, students)

    return JsonResponse({
        "success": True,
        "students": [student.to_dict() for student in page_obj],
        "pagination": pagination_payload(page_obj, paginator),
    })


def _create_student(request):
    if not request.profile.can_manage_students():
        return json_error("Only administrators can add students", status=403)

    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    form = StudentForm(data, config=get_center_config(request.user))
    if not form.is_valid():
        return json_error("Invalid student data", errors=form.errors.get_json_data())

    with transaction.atomic():
        student = form.save()

    logger.info(f"Student {student.full_name} created by {request.user.username}")
    return JsonResponse({"success": True, "student": student.to_dict()}, status=201)


# =============================================================================
# STUDENT DETAIL / UPDATE / DELETE
# =============================================================================

@require_GET
@api_login_required
def student_detail(request, student_id):
    try:
        student = _get_visible_student(request, student_id)
    except Student.DoesNotExist:
        return json_error("Student not found", status=404)

    return JsonResponse({"success": True, "student": student.to_dict()})


@csrf_exempt
@require_POST
@role_required('admin')
def student_update(request, student_id):
    try:
        student = Student.objects.get(pk=student_id)
        payload = parse_json_body(request)
    except Student.DoesNotExist:
        return json_error("Student not found", status=404)
    except BadRequest as e:
        return json_error(str(e))

    data = merge_instance_data(student, StudentForm.Meta.fields, payload)
    form = StudentForm(data, instance=student, config=get_center_config(request.user))
    if not form.is_valid():
        return json_error("Invalid student data", errors=form.errors.get_json_data())

    with transaction.atomic():
        student = form.save()

    logger.info(f"Student {student.full_name} updated by {request.user.username}")
    return JsonResponse({"success": True, "student": student.to_dict()})


@csrf_exempt
@require_POST
@role_required('admin')
def student_delete(request, student_id):
    try:
        student = Student.objects.get(pk=student_id)
    except Student.DoesNotExist:
        return json_error("Student not found", status=404)

    name = student.full_name
    student.delete()

    logger.info(f"Student {name} deleted by {request.user.username}")
    return JsonResponse({"success": True, "message": f"Student {name} deleted"})
