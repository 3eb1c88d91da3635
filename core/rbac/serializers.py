"""
Serializers for RBAC models.
Handles serialization/deserialization for API endpoints.
"""
from rest_framework import serializers

from .models import Permission, Role
from .services import set_role_permissions


class PermissionSerializer(serializers.ModelSerializer):
    """Serializer for Permission model."""
    key = serializers.CharField(read_only=True)

    class Meta:
        model = Permission
        fields = ['id', 'action', 'resource', 'key', 'description']
        read_only_fields = fields


class RoleListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for role lists."""

    class Meta:
        model = Role
        fields = ['id', 'name', 'description', 'is_system_role']
        read_only_fields = fields


class RoleSerializer(serializers.ModelSerializer):
    """
    Serializer for Role model with its permission keys.
    Roles created through the API are never system roles.
    """
    permissions = serializers.SerializerMethodField()
    permission_ids = serializers.PrimaryKeyRelatedField(
        queryset=Permission.objects.all(),
        many=True,
        write_only=True,
        required=False
    )

    class Meta:
        model = Role
        fields = [
            'id', 'name', 'description', 'is_system_role',
            'permissions', 'permission_ids', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'is_system_role', 'created_at', 'updated_at']

    def get_permissions(self, obj):
        return obj.permission_keys()

    def validate_name(self, value):
        value = value.strip().lower()
        if not value:
            raise serializers.ValidationError("Role name cannot be blank.")
        return value

    def create(self, validated_data):
        permissions = validated_data.pop('permission_ids', [])
        role = Role.objects.create(is_system_role=False, **validated_data)
        set_role_permissions(role, permissions)
        return role


class RolePermissionsUpdateSerializer(serializers.Serializer):
    """Full replacement of a role's permission set."""
    permission_ids = serializers.PrimaryKeyRelatedField(
        queryset=Permission.objects.all(),
        many=True
    )


class UserRolesUpdateSerializer(serializers.Serializer):
    """Full replacement of a user's role set."""
    role_ids = serializers.PrimaryKeyRelatedField(
        queryset=Role.objects.all(),
        many=True
    )


class PermissionCheckSerializer(serializers.Serializer):
    """Request body for an authorization check."""
    action = serializers.CharField(max_length=100, allow_blank=True)
    resource = serializers.CharField(max_length=100, allow_blank=True)
