# core/views.py

"""
Center settings endpoints.

Everyone signed in can read the settings in effect; only admins change
them. Updates go to the row the caller's configuration resolves to (the
caller's own row, else the center's first row), and a row is created for
the caller when none exists yet.
"""

import logging

from django.db import transaction
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from accounts.decorators import api_login_required, role_required
from core.config import get_center_config
from utils.utils import BadRequest, json_error, merge_instance_data, parse_json_body
from .forms import CenterSettingsForm
from .models import CenterSettings

logger = logging.getLogger(__name__)


def _settings_row(user):
    row = CenterSettings.objects.filter(owner=user).first()
    if row is None:
        row = CenterSettings.objects.order_by('created_at').first()
    return row


def _settings_payload(user):
    config = get_center_config(user)
    return {
        'center_name': config.center_name,
        'center_email': config.center_email,
        'center_phone': config.center_phone,
        'center_address': config.center_address,
        'country': config.country,
        'subjects': list(config.subjects),
        'class_levels': list(config.class_levels),
        'academic_year': config.academic_year,
        'grading_scale': config.grading_scale,
        'passing_grade': float(config.passing_grade),
        'currency': config.currency,
        'currency_label': config.currency_label,
        'default_payment_amount': float(config.default_payment_amount),
        'receipt_prefix': config.receipt_prefix,
        'date_format': config.date_format,
        'language': config.language,
    }


def _save_settings(request, payload):
    """Validate `payload` over the current row and save it."""
    row = _settings_row(request.user) or CenterSettings(owner=request.user)

    data = merge_instance_data(row, CenterSettingsForm.Meta.fields, payload)
    data['country'] = str(data.get('country') or '')

    form = CenterSettingsForm(data, instance=row)
    if not form.is_valid():
        return json_error("Invalid settings", errors=form.errors.get_json_data())

    with transaction.atomic():
        form.save()

    logger.info(f"Center settings updated by {request.user.username}: {', '.join(sorted(payload))}")
    return None


def _read_payload(request):
    try:
        return parse_json_body(request), None
    except BadRequest as e:
        return None, json_error(str(e))


# =============================================================================
# SETTINGS
# =============================================================================

@api_login_required
def _get_settings(request):
    return JsonResponse({"success": True, "settings": _settings_payload(request.user)})


@role_required('admin')
def _update_settings(request):
    payload, error = _read_payload(request)
    if error:
        return error

    unknown = sorted(set(payload) - set(CenterSettingsForm.Meta.fields))
    if unknown:
        return json_error(f"Unknown settings: {', '.join(unknown)}")

    error = _save_settings(request, payload)
    if error:
        return error
    return JsonResponse({
        "success": True,
        "message": "Settings updated",
        "settings": _settings_payload(request.user),
    })


@csrf_exempt
@require_http_methods(["GET", "POST"])
def center_settings(request):
    """GET: settings in effect. POST (admin): partial update."""
    if request.method == 'POST':
        return _update_settings(request)
    return _get_settings(request)


# =============================================================================
# SUBJECTS / CLASS LEVELS
# =============================================================================

def _list_setting_view(field_name):
    """
    GET returns the list, POST (admin) replaces it.
    Body: {"<field_name>": ["...", "..."]}
    """
    @api_login_required
    def read(request):
        config = get_center_config(request.user)
        return JsonResponse({"success": True, field_name: list(getattr(config, field_name))})

    @role_required('admin')
    def write(request):
        payload, error = _read_payload(request)
        if error:
            return error
        values = payload.get(field_name)
        if not isinstance(values, list) or not values:
            return json_error(f"{field_name} must be a non-empty list")

        error = _save_settings(request, {field_name: values})
        if error:
            return error
        config = get_center_config(request.user)
        return JsonResponse({"success": True, field_name: list(getattr(config, field_name))})

    @csrf_exempt
    @require_http_methods(["GET", "POST"])
    def view(request):
        if request.method == 'POST':
            return write(request)
        return read(request)

    view.__name__ = f"{field_name}_view"
    return view


subjects = _list_setting_view('subjects')
class_levels = _list_setting_view('class_levels')
