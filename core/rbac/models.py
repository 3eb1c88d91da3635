"""
RBAC Models
Flat action x resource permissions, roles that bundle them, and the
join tables binding roles to permissions and users to roles.
"""
from django.conf import settings
from django.db import models

from .catalog import Action, Resource, permission_key


class Permission(models.Model):
    """
    A single (action, resource) pair, e.g. ('update', 'results').
    The pair is the natural key; rows are never mutated after creation.
    """
    action = models.CharField(
        max_length=100,
        choices=Action.choices,
        help_text="Operation identifier (e.g., 'view', 'approve')"
    )
    resource = models.CharField(
        max_length=100,
        choices=Resource.choices,
        help_text="Protected area identifier (e.g., 'results', 'payments')"
    )
    description = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'permissions'
        verbose_name = 'Permission'
        verbose_name_plural = 'Permissions'
        unique_together = ('action', 'resource')
        ordering = ['resource', 'action']

    def __str__(self):
        return self.key

    @property
    def key(self):
        return permission_key(self.action, self.resource)


class Role(models.Model):
    """
    Named bundle of permissions. System roles are provisioned by the
    `seed_rbac` command and should be treated as protected by callers.
    """
    name = models.CharField(max_length=50, unique=True, db_index=True)
    description = models.TextField(blank=True, default='')
    is_system_role = models.BooleanField(default=False)
    permissions = models.ManyToManyField(
        Permission,
        through='RolePermission',
        related_name='roles',
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'roles'
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'
        ordering = ['name']

    def __str__(self):
        return self.name

    def permission_keys(self):
        return sorted(p.key for p in self.permissions.all())


class RolePermission(models.Model):
    """Junction table linking a role to one of its permissions."""
    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name='role_permissions'
    )
    permission = models.ForeignKey(
        Permission,
        on_delete=models.CASCADE,
        related_name='role_permissions'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'role_permissions'
        verbose_name = 'Role Permission'
        verbose_name_plural = 'Role Permissions'
        unique_together = ('role', 'permission')
        ordering = ['role__name', 'permission__resource', 'permission__action']

    def __str__(self):
        return f"{self.role.name} - {self.permission.key}"


class UserRole(models.Model):
    """
    Junction table linking a user to a role.
    A user may hold any number of roles; reconciliation only ever adds rows.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='user_roles'
    )
    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name='user_roles'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'user_roles'
        verbose_name = 'User Role'
        verbose_name_plural = 'User Roles'
        unique_together = ('user', 'role')
        ordering = ['user__email', 'role__name']

    def __str__(self):
        return f"{self.user.email} - {self.role.name}"
