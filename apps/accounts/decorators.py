# accounts/decorators.py

"""
Access control for the JSON endpoints.

    @role_required('admin')              -> admins only
    @role_required('admin', 'teacher')   -> staff
    @api_login_required                  -> any authenticated user

Unauthenticated requests get 401, authenticated users with the wrong
role get 403. The resolved profile is attached as request.profile.
"""

from functools import wraps
import logging

from accounts.models import get_user_profile
from utils.utils import json_error

logger = logging.getLogger(__name__)


def _resolve_profile(request):
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return get_user_profile(user)


def api_login_required(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        profile = _resolve_profile(request)
        if profile is None:
            return json_error("Authentication required", status=401)
        if not profile.is_active_profile():
            return json_error("Your account is inactive", status=403)
        request.profile = profile
        return view_func(request, *args, **kwargs)
    return wrapper


def role_required(*roles):
    """Restrict a view to users whose profile role is one of `roles`."""
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            profile = _resolve_profile(request)
            if profile is None:
                return json_error("Authentication required", status=401)
            if not profile.is_active_profile():
                return json_error("Your account is inactive", status=403)

            role = 'admin' if profile.is_admin_user() else profile.role
            if role not in roles:
                logger.warning(
                    f"User {request.user.username} ({role}) denied access to {request.path}"
                )
                return json_error("You do not have permission to perform this action", status=403)

            request.profile = profile
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
