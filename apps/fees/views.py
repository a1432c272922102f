# fees/views.py

"""
Billing JSON endpoints.

Admins see and change every billing record; parents can read the
records and receipts of their own children. All mutations go through
BillingService, which reconciles the record inside the same transaction.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from accounts.decorators import role_required
from core.config import get_center_config
from students.models import Student
from utils.utils import (
    BadRequest,
    json_error,
    paginate_queryset,
    pagination_payload,
    parse_filters,
    parse_json_body,
    parse_uuid,
)
from .exceptions import DuplicateBillingRecord, LedgerError
from .models import BillingRecord, PaymentEntry
from .receipts import build_receipt_pdf
from .services import BillingService
from .stats import get_payment_statistics

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def _ledger_error_response(error):
    """Translate a billing / validation error into a JSON error response."""
    if isinstance(error, ObjectDoesNotExist):
        return json_error(str(error) or "Not found", status=404)
    messages = list(error.messages)
    status = 409 if isinstance(error, DuplicateBillingRecord) else 400
    return json_error(messages[0] if messages else "Invalid data", status=status, errors=messages)


def _visible_records(request):
    return BillingRecord.objects.filter(
        student__in=Student.objects.visible_to(request.profile)
    ).select_related('student')


def _payment_data(data):
    return {
        'amount': data.get('amount'),
        'payment_method': data.get('payment_method'),
        'payment_date': data.get('payment_date'),
        'notes': data.get('notes'),
    }


def _ledger_payload(record):
    return {
        "amount_paid": float(record.amount_paid),
        "balance": float(record.balance),
        "status": record.status,
        "overpayment": float(record.overpayment),
    }


# =============================================================================
# BILLING RECORDS
# =============================================================================

@csrf_exempt
@require_http_methods(["GET", "POST"])
@role_required('admin', 'parent')
def billing_list(request):
    """
    GET: billing records visible to the current user.
         Filters: status, billing_period, class_level, student
    POST: record a payment for a student and period (admin only).
          The billing record is created on the first payment.
    """
    if request.method == 'POST':
        if not request.profile.can_manage_finances():
            return json_error("Only administrators can record payments", status=403)
        return _record_payment(request)

    filters = parse_filters(request, ['status', 'billing_period', 'class_level', 'student'])
    try:
        filters['student'] = parse_uuid(filters['student'], 'student')
    except BadRequest as e:
        return json_error(str(e))

    records = _visible_records(request)
    if filters['status']:
        records = records.filter(status=filters['status'])
    if filters['billing_period']:
        records = records.filter(billing_period=filters['billing_period'])
    if filters['class_level']:
        records = records.filter(class_level=filters['class_level'])
    if filters['student']:
        records = records.filter(student_id=filters['student'])

    page_obj, paginator = paginate_queryset(request, records.prefetch_related('payments'))

    return JsonResponse({
        "success": True,
        "records": [record.to_dict() for record in page_obj],
        "pagination": pagination_payload(page_obj, paginator),
    })


def _record_payment(request):
    """
    Body: {"student": "<uuid>", "billing_period": "YYYY-MM", "total_amount": 20000,
           "amount": 5000, "payment_method": "cash", "payment_date": "YYYY-MM-DD", "notes": ""}
    """
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    try:
        student = Student.objects.get(pk=data.get('student'))
    except (Student.DoesNotExist, ValidationError, ValueError):
        return json_error("Student not found", status=404)

    config = get_center_config(request.user)
    try:
        record, entry = BillingService.record_payment(
            student,
            data.get('billing_period'),
            data.get('total_amount'),
            _payment_data(data),
            config,
            received_by=request.user.username,
        )
    except (LedgerError, ValidationError) as e:
        return _ledger_error_response(e)
    except Exception as e:
        logger.error(f"Error recording payment for student {student.pk}: {e}", exc_info=True)
        return json_error("Could not record the payment", status=500)

    return JsonResponse({
        "success": True,
        "message": f"Payment {entry.receipt_number} recorded",
        "receipt_number": entry.receipt_number,
        **_ledger_payload(record),
        "record": record.to_dict(),
    }, status=201)


@require_GET
@role_required('admin', 'parent')
def billing_detail(request, record_id):
    try:
        record = _visible_records(request).get(pk=record_id)
    except BillingRecord.DoesNotExist:
        return json_error("Billing record not found", status=404)

    return JsonResponse({"success": True, "record": record.to_dict()})


@csrf_exempt
@require_POST
@role_required('admin')
def billing_update_total(request, record_id):
    """Body: {"total_amount": 25000}"""
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    try:
        record = BillingService.update_total_amount(record_id, data.get('total_amount'))
    except (LedgerError, ValidationError) as e:
        return _ledger_error_response(e)

    return JsonResponse({
        "success": True,
        "message": "Total amount updated",
        **_ledger_payload(record),
        "record": record.to_dict(),
    })


@csrf_exempt
@require_POST
@role_required('admin')
def billing_delete(request, record_id):
    try:
        BillingService.delete_billing_record(record_id)
    except LedgerError as e:
        return _ledger_error_response(e)

    logger.info(f"Billing record {record_id} deleted by {request.user.username}")
    return JsonResponse({"success": True, "message": "Billing record deleted"})


# =============================================================================
# PAYMENT ENTRIES
# =============================================================================

@csrf_exempt
@require_POST
@role_required('admin')
def payment_add(request, record_id):
    """Body: {"amount": 5000, "payment_method": "cash", "payment_date": "YYYY-MM-DD", "notes": ""}"""
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    config = get_center_config(request.user)
    try:
        entry = BillingService.add_payment(
            record_id, _payment_data(data), config, received_by=request.user.username
        )
    except (LedgerError, ValidationError) as e:
        return _ledger_error_response(e)
    except Exception as e:
        logger.error(f"Error adding payment to billing record {record_id}: {e}", exc_info=True)
        return json_error("Could not add the payment", status=500)

    record = entry.record
    return JsonResponse({
        "success": True,
        "message": f"Payment {entry.receipt_number} added",
        "receipt_number": entry.receipt_number,
        "payment": entry.to_dict(),
        **_ledger_payload(record),
    }, status=201)


@csrf_exempt
@require_POST
@role_required('admin')
def payment_remove(request, record_id):
    """Body: {"receipt_number": "TUT-2026-00001"}"""
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return json_error(str(e))

    receipt_number = (data.get('receipt_number') or '').strip()
    if not receipt_number:
        return json_error("receipt_number is required")

    try:
        entry = BillingService.remove_payment(record_id, receipt_number)
    except LedgerError as e:
        return _ledger_error_response(e)
    except Exception as e:
        logger.error(f"Error removing payment {receipt_number} from {record_id}: {e}", exc_info=True)
        return json_error("Could not remove the payment", status=500)

    return JsonResponse({
        "success": True,
        "message": f"Payment {receipt_number} removed",
        **_ledger_payload(entry.record),
    })


@require_GET
@role_required('admin', 'parent')
def receipt_pdf(request, record_id, receipt_number):
    try:
        entry = PaymentEntry.objects.select_related('record__student').get(
            record__in=_visible_records(request).filter(pk=record_id),
            receipt_number=receipt_number,
        )
    except PaymentEntry.DoesNotExist:
        return json_error("Receipt not found", status=404)

    pdf = build_receipt_pdf(entry, get_center_config(request.user))

    response = HttpResponse(content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="receipt_{entry.receipt_number}.pdf"'
    response.write(pdf)
    return response


# =============================================================================
# STATISTICS
# =============================================================================

@require_GET
@role_required('admin', 'parent')
def payment_stats(request):
    filters = parse_filters(request, ['billing_period', 'class_level', 'status', 'student'])
    try:
        filters['student'] = parse_uuid(filters['student'], 'student')
    except BadRequest as e:
        return json_error(str(e))

    stats = get_payment_statistics(
        filters,
        students=Student.objects.visible_to(request.profile),
    )
    return JsonResponse({"success": True, "stats": stats})
