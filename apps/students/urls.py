# students/urls.py

"""
URL Configuration for Students Module
All URLs use UUID primary keys
"""

from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    path('', views.student_list, name='student_list'),
    path('<uuid:student_id>/', views.student_detail, name='student_detail'),
    path('<uuid:student_id>/update/', views.student_update, name='student_update'),
    path('<uuid:student_id>/delete/', views.student_delete, name='student_delete'),
]
