# reports/urls.py

from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('overview/', views.overview_report, name='overview'),
    path('attendance/', views.attendance_report, name='attendance'),
    path('student-performance/', views.student_performance_report, name='student_performance'),
    path('financial/', views.financial_report, name='financial'),
    path('financial/export/', views.financial_report_export, name='financial_export'),
]
