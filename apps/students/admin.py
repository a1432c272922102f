# students/admin.py

from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'class_level', 'gender', 'status', 'parent_user', 'enrollment_date')
    list_filter = ('class_level', 'status', 'gender')
    search_fields = ('first_name', 'last_name', 'parent_name', 'parent_phone')
    raw_id_fields = ('parent_user',)
    readonly_fields = ('created_at', 'updated_at', 'created_by_id', 'updated_by_id')

    fieldsets = (
        ('Student', {
            'fields': ('first_name', 'last_name', 'date_of_birth', 'gender', 'address')
        }),
        ('Enrollment', {
            'fields': ('class_level', 'enrollment_date', 'status', 'notes')
        }),
        ('Parent', {
            'fields': ('parent_user', 'parent_name', 'parent_phone', 'parent_email')
        }),
        ('Audit', {
            'fields': ('created_at', 'updated_at', 'created_by_id', 'updated_by_id'),
            'classes': ('collapse',)
        }),
    )
