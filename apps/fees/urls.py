# fees/urls.py

"""
URL Configuration for Fees Module
Billing records, payment entries, receipts and payment statistics
"""

from django.urls import path
from . import views

app_name = 'fees'

urlpatterns = [
    # =============================================================================
    # BILLING RECORDS
    # =============================================================================
    path('billing/', views.billing_list, name='billing_list'),
    path('billing/<uuid:record_id>/', views.billing_detail, name='billing_detail'),
    path('billing/<uuid:record_id>/total/', views.billing_update_total, name='billing_update_total'),
    path('billing/<uuid:record_id>/delete/', views.billing_delete, name='billing_delete'),

    # =============================================================================
    # PAYMENT ENTRIES
    # =============================================================================
    path('billing/<uuid:record_id>/payments/', views.payment_add, name='payment_add'),
    path('billing/<uuid:record_id>/payments/remove/', views.payment_remove, name='payment_remove'),
    path(
        'billing/<uuid:record_id>/receipts/<str:receipt_number>/pdf/',
        views.receipt_pdf,
        name='receipt_pdf'
    ),

    # =============================================================================
    # STATISTICS
    # =============================================================================
    path('stats/', views.payment_stats, name='payment_stats'),
]
