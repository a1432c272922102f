# accounts/urls.py

from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('me/', views.me, name='me'),
    path('users/', views.user_list, name='user_list'),
    path('users/<int:user_id>/role/', views.update_role, name='update_role'),
    path('link-parent/', views.link_parent, name='link_parent'),
]
