"""
URL patterns for role settings
"""

from django.urls import path
from . import role_views

app_name = 'user_management'

urlpatterns = [
    path('', role_views.role_list, name='settings_roles'),
    path('add/', role_views.role_add, name='settings_roles_add'),
    path('<int:role_id>/edit/', role_views.role_edit, name='settings_roles_edit'),
    path('<int:role_id>/delete/', role_views.role_delete, name='settings_roles_delete'),
]
