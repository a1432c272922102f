# fees/admin.py

from django.contrib import admin

from .models import BillingRecord, PaymentEntry


class PaymentEntryInline(admin.TabularInline):
    """Entries are immutable; they can only be deleted here."""
    model = PaymentEntry
    extra = 0
    fields = ('sequence', 'receipt_number', 'amount', 'payment_date', 'payment_method', 'received_by', 'notes')
    readonly_fields = fields
    ordering = ('sequence',)

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(BillingRecord)
class BillingRecordAdmin(admin.ModelAdmin):
    list_display = ('student', 'billing_period', 'class_level', 'total_amount', 'amount_paid', 'balance', 'status')
    list_filter = ('status', 'billing_period', 'class_level')
    search_fields = ('student__first_name', 'student__last_name', 'payments__receipt_number')
    raw_id_fields = ('student',)
    readonly_fields = ('amount_paid', 'balance', 'status', 'created_at', 'updated_at')
    inlines = [PaymentEntryInline]


@admin.register(PaymentEntry)
class PaymentEntryAdmin(admin.ModelAdmin):
    list_display = ('receipt_number', 'record', 'sequence', 'amount', 'payment_method', 'payment_date')
    list_filter = ('payment_method', 'payment_date')
    search_fields = ('receipt_number', 'record__student__first_name', 'record__student__last_name')
    date_hierarchy = 'payment_date'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
