# core/admin.py

from django.contrib import admin

from .models import CenterSettings


@admin.register(CenterSettings)
class CenterSettingsAdmin(admin.ModelAdmin):
    list_display = ('center_name', 'owner', 'academic_year', 'currency', 'receipt_prefix', 'updated_at')
    search_fields = ('center_name', 'owner__username')
    raw_id_fields = ('owner',)
    readonly_fields = ('created_at', 'updated_at')

    fieldsets = (
        ('Center', {
            'fields': ('owner', 'center_name', 'center_email', 'center_phone', 'center_address', 'country')
        }),
        ('Academics', {
            'fields': ('subjects', 'class_levels', 'academic_year', 'grading_scale', 'passing_grade')
        }),
        ('Finance', {
            'fields': ('currency', 'default_payment_amount', 'receipt_prefix')
        }),
        ('Display', {
            'fields': ('date_format', 'language')
        }),
        ('Audit', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
