"""
URL Configuration for the RBAC app.
Handles role administration and authorization checks.
"""
from django.urls import path
from . import views

app_name = 'rbac'

urlpatterns = [
    # Permission endpoints
    path('permissions/', views.permission_list, name='permission-list'),

    # Role endpoints
    path('roles/', views.role_list, name='role-list'),
    path('roles/<int:pk>/', views.role_detail, name='role-detail'),
    path('roles/<int:pk>/permissions/', views.role_permissions, name='role-permissions'),

    # User-specific roles
    path('users/<int:user_id>/roles/', views.user_roles, name='user-roles'),

    # Current user authorization
    path('me/permissions/', views.my_permissions, name='my-permissions'),
    path('check/', views.check_permission, name='check-permission'),
]
