# utils/utils.py

from datetime import date, datetime
import json
import logging
import uuid

from django.core.paginator import Paginator, EmptyPage, PageNotAnInteger
from django.http import JsonResponse
from django.utils.dateparse import parse_date

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Raised by request parsing helpers; views answer it with HTTP 400."""


# =============================================================================
# CORE UTILITY HELPER FUNCTIONS
# =============================================================================

def paginate_queryset(request, queryset, per_page=20):
    paginator = Paginator(queryset, per_page)
    page = request.GET.get('page', 1)
    try:
        page_obj = paginator.page(page)
    except PageNotAnInteger:
        page_obj = paginator.page(1)
    except EmptyPage:
        page_obj = paginator.page(paginator.num_pages)
    return page_obj, paginator


def pagination_payload(page_obj, paginator):
    return {
        'page': page_obj.number,
        'num_pages': paginator.num_pages,
        'total': paginator.count,
        'has_next': page_obj.has_next(),
        'has_previous': page_obj.has_previous(),
    }


def parse_filters(request, filter_keys):
    """
    Extract filter values from request.GET.
    filter_keys: list of filter names to extract
    Returns dict: {key: value or None}

    The value 'all' is treated like an empty filter.
    """
    filters = {}
    for key in filter_keys:
        value = request.GET.get(key, '').strip()
        filters[key] = value if value and value.lower() != 'all' else None
    return filters


# =============================================================================
# REQUEST PARSING
# =============================================================================

def parse_json_body(request):
    """
    Decode a JSON object from the request body.

    Raises:
        BadRequest: body is not valid JSON or not an object
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequest("Invalid JSON data.")
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object.")
    return data


def parse_uuid(value, field_name='id'):
    """
    Validate a UUID passed as a filter or body value.

    Returns None when value is empty, the UUID otherwise.
    """
    if value in (None, ''):
        return None
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise BadRequest(f"{field_name} must be a valid id")


def parse_date_value(value, field_name='date', default=None):
    """
    Parse an ISO date (YYYY-MM-DD) or datetime string.

    Returns default when value is empty.
    """
    if value in (None, ''):
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        parsed = parse_date(text[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        raise BadRequest(f"{field_name} must be a date in YYYY-MM-DD format")
    return parsed


# =============================================================================
# RESPONSES
# =============================================================================

def json_error(message, status=400, **extra):
    payload = {"success": False, "message": message}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def validation_messages(error):
    """Flatten a Django ValidationError into a list of strings."""
    if hasattr(error, 'message_dict'):
        return [
            f"{field}: {message}" if field != '__all__' else message
            for field, messages in error.message_dict.items()
            for message in messages
        ]
    return list(error.messages)


def merge_instance_data(instance, fields, payload):
    """
    Form data for a partial update: current instance values overlaid
    with the keys present in the request payload.
    """
    from django.forms.models import model_to_dict

    data = model_to_dict(instance, fields=fields)
    for key in fields:
        if key in payload:
            data[key] = payload[key]
    return data
