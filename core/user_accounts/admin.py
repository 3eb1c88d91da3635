from django.contrib import admin
from .models import CustomUser, UserType


@admin.register(UserType)
class UserTypeAdmin(admin.ModelAdmin):
    """Admin configuration for UserType model"""
    list_display = ['type_name', 'description']
    search_fields = ['type_name']


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    """Admin configuration for CustomUser model"""
    list_display = ['email', 'name', 'phone_number', 'user_type', 'is_active']
    list_filter = ['user_type', 'is_active']
    search_fields = ['email', 'name', 'phone_number']
    readonly_fields = ['last_login', 'date_joined']

    fieldsets = (
        ('User Information', {
            'fields': ('email', 'name', 'phone_number')
        }),
        ('Type & Status', {
            'fields': ('user_type', 'is_active')
        }),
        ('Authentication', {
            'fields': ('last_login', 'date_joined')
        }),
    )
