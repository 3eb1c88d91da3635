"""
URL configuration for the eportal project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('core/', include('core.urls')),

    # Authentication endpoints (login, token refresh)
    path('auth/', include('core.user_accounts.auth_urls')),
]
