"""
URL Configuration for Core module.
This module handles core functionality including roles and permissions.
"""
from django.urls import path, include

app_name = 'core'

urlpatterns = [
    # Roles and permissions sub-app URLs
    path('rbac/', include('core.rbac.urls')),
]
