"""
URL configuration for edutrack project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

urlpatterns = [
    # Django admin
    path('admin/', admin.site.urls),

    # Core app - center settings
    path('core/', include(('core.urls', 'core'), namespace='core')),

    # Accounts app - current user, roles, parent links
    path('accounts/', include(('accounts.urls', 'accounts'), namespace='accounts')),

    # Students app
    path('students/', include(('students.urls', 'students'), namespace='students')),

    # Academics app - attendance and grades
    path('academics/', include(('academics.urls', 'academics'), namespace='academics')),

    # Fees app - billing records and payment entries
    path('fees/', include(('fees.urls', 'fees'), namespace='fees')),

    # Reports app
    path('reports/', include(('reports.urls', 'reports'), namespace='reports')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
