# accounts/views.py

import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from students.models import Student
from utils.utils import BadRequest, json_error, parse_filters, parse_json_body
from .decorators import api_login_required, role_required
from .models import UserProfile, get_user_profile

logger = logging.getLogger(__name__)


# =============================================================================
# CURRENT USER
# =============================================================================

@require_GET
@api_login_required
def me(request):
    """Profile of the signed-in user, with linked children for parents"""
    payload = request.profile.to_dict()
    if request.profile.is_parent():
        payload['children'] = [
            {'id': str(student.id), 'full_name': student.full_name, 'class_level': student.class_level}
            for student in Student.objects.filter(parent_user=request.user)
        ]
    return JsonResponse({"success": True, "user": payload})


# =============================================================================
# USER MANAGEMENT (ADMIN)
# =============================================================================

@require_GET
@role_required('admin')
def user_list(request):
    filters = parse_filters(request, ['role', 'q'])

    users = User.objects.select_related('profile').order_by('username')
    if filters['role']:
        users = users.filter(profile__role=filters['role'])
    if filters['q']:
        users = users.filter(Q(username__icontains=filters['q']) | Q(email__icontains=filters['q']))

    return JsonResponse({
        "success": True,
        "users": [get_user_profile(user).to_dict() for user in users],
    })


@csrf_exempt
@require_POST
@role_required('admin')
def update_role(request, user_id):
    try:
        data = parse_json_body(request)
        user = User.objects.get(pk=user_id)
    except BadRequest as e:
        return json_error(str(e))
    except User.DoesNotExist:
        return json_error("User not found", status=404)

    role = data.get('role')
    valid_roles = [choice for choice, _ in UserProfile.USER_ROLES]
    if role not in valid_roles:
        return json_error(f"Role must be one of: {', '.join(valid_roles)}")

    if user.pk == request.user.pk and role != UserProfile.ROLE_ADMIN:
        return json_error("You cannot remove your own administrator role")

    profile = get_user_profile(user)
    previous = profile.role
    profile.role = role
    profile.save(update_fields=['role'])

    logger.info(f"Role of {user.username} changed from {previous} to {role} by {request.user.username}")
    return JsonResponse({"success": True, "user": profile.to_dict()})


@csrf_exempt
@require_POST
@role_required('admin')
def link_parent(request):
    """
    Link a parent account to a student.

    Body: {"parent_id": <user pk>, "student_id": "<uuid>"}
    Passing "parent_id": null unlinks the student.
    """
    try:
        data = parse_json_body(request)
        student = Student.objects.get(pk=data.get('student_id'))
    except BadRequest as e:
        return json_error(str(e))
    except (Student.DoesNotExist, ValueError, ValidationError):
        return json_error("Student not found", status=404)

    parent_id = data.get('parent_id')
    parent = None
    if parent_id is not None:
        try:
            parent = User.objects.get(pk=parent_id)
        except (User.DoesNotExist, ValueError):
            return json_error("Parent user not found", status=404)
        if not get_user_profile(parent).is_parent():
            return json_error("Only users with the parent role can be linked to students")

    student.parent_user = parent
    student.save(update_fields=['parent_user'])

    logger.info(
        f"Student {student.full_name} linked to parent "
        f"{parent.username if parent else None} by {request.user.username}"
    )
    return JsonResponse({"success": True, "student": student.to_dict()})
