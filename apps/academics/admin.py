# academics/admin.py

from django.contrib import admin

from .models import Attendance, Grade


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ('student', 'date', 'status', 'marked_by')
    list_filter = ('status', 'date', 'student__class_level')
    search_fields = ('student__first_name', 'student__last_name')
    date_hierarchy = 'date'
    raw_id_fields = ('student',)


@admin.register(Grade)
class GradeAdmin(admin.ModelAdmin):
    list_display = ('student', 'subject', 'test_name', 'test_type', 'score', 'max_score', 'percentage', 'test_date')
    list_filter = ('subject', 'test_type', 'student__class_level')
    search_fields = ('student__first_name', 'student__last_name', 'test_name')
    readonly_fields = ('percentage', 'created_at', 'updated_at')
    raw_id_fields = ('student',)
