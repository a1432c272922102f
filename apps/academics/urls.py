# academics/urls.py

"""
URL Configuration for Academics Module
Attendance marking and grade management
"""

from django.urls import path
from . import views

app_name = 'academics'

urlpatterns = [
    # =============================================================================
    # ATTENDANCE
    # =============================================================================
    path('attendance/', views.attendance_list, name='attendance_list'),
    path('attendance/mark/', views.attendance_mark, name='attendance_mark'),
    path('attendance/bulk/', views.attendance_bulk_mark, name='attendance_bulk_mark'),
    path('attendance/stats/', views.attendance_stats, name='attendance_stats'),

    # =============================================================================
    # GRADES
    # =============================================================================
    path('grades/', views.grade_list, name='grade_list'),
    path('grades/stats/', views.grade_stats, name='grade_stats'),
    path('grades/<uuid:grade_id>/', views.grade_detail, name='grade_detail'),
    path('grades/<uuid:grade_id>/update/', views.grade_update, name='grade_update'),
    path('grades/<uuid:grade_id>/delete/', views.grade_delete, name='grade_delete'),
]
