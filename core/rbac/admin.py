from django.contrib import admin
from .models import Permission, Role, RolePermission, UserRole


class RolePermissionInline(admin.TabularInline):
    model = RolePermission
    extra = 0
    autocomplete_fields = ['permission']


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    """Admin configuration for Permission model"""
    list_display = ['action', 'resource', 'description']
    list_filter = ['resource', 'action']
    search_fields = ['action', 'resource', 'description']


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    """Admin configuration for Role model"""
    list_display = ['name', 'description', 'is_system_role']
    list_filter = ['is_system_role']
    search_fields = ['name']
    inlines = [RolePermissionInline]

    def has_delete_permission(self, request, obj=None):
        """System roles are provisioned by seed_rbac and cannot be deleted here"""
        if obj is not None and obj.is_system_role:
            return False
        return super().has_delete_permission(request, obj)


@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    """Admin configuration for UserRole model"""
    list_display = ['user', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__email', 'user__name']
