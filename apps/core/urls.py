# core/urls.py

from django.urls import path
from . import views

app_name = 'core'

urlpatterns = [
    path('settings/', views.center_settings, name='center_settings'),
    path('settings/subjects/', views.subjects, name='subjects'),
    path('settings/class-levels/', views.class_levels, name='class_levels'),
]
