"""
API Views for RBAC roles and permissions.
Provides REST API endpoints for role administration and authorization checks.
"""
from django.contrib.auth import get_user_model
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from eportal.pagination import auto_paginate

from .decorators import require_permission
from .models import Permission, Role
from .serializers import (
    PermissionCheckSerializer,
    PermissionSerializer,
    RoleListSerializer,
    RolePermissionsUpdateSerializer,
    RoleSerializer,
    UserRolesUpdateSerializer,
)
from .services import (
    can_assign_roles,
    get_request_evaluator,
    get_request_role_names,
    get_user_permission_keys,
    get_user_roles,
    set_role_permissions,
    set_user_roles,
    user_can_perform_action,
)


# ============================================================================
# Permission API Views
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
@require_permission('view', 'permissions')
@auto_paginate
def permission_list(request):
    """
    List all permissions.

    GET /permissions/
    - Query params:
        - resource: Filter by resource
        - action: Filter by action
    """
    permissions = Permission.objects.all()

    resource = request.query_params.get('resource')
    if resource:
        permissions = permissions.filter(resource=resource)

    action = request.query_params.get('action')
    if action:
        permissions = permissions.filter(action=action)

    serializer = PermissionSerializer(permissions, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


# ============================================================================
# Role API Views
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@require_permission(None, 'roles')
@auto_paginate
def role_list(request):
    """
    List all roles or create a new role.

    GET /roles/
    - Query params:
        - search: Search across name and description

    POST /roles/
    - Request body: { "name", "description", "permission_ids": [...] }
    """
    if request.method == 'GET':
        roles = Role.objects.all()

        search = request.query_params.get('search')
        if search:
            roles = roles.filter(
                Q(name__icontains=search) |
                Q(description__icontains=search)
            )

        serializer = RoleListSerializer(roles, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = RoleSerializer(data=request.data)
    if serializer.is_valid():
        role = serializer.save()
        return Response(RoleSerializer(role).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
@require_permission(None, 'roles')
def role_detail(request, pk):
    """
    Retrieve or delete a specific role.

    GET /roles/{id}/
    - Returns the role including its permission keys

    DELETE /roles/{id}/
    - Delete a role. System roles are protected.
    """
    role = get_object_or_404(Role.objects.prefetch_related('permissions'), pk=pk)

    if request.method == 'GET':
        serializer = RoleSerializer(role)
        return Response(serializer.data, status=status.HTTP_200_OK)

    if role.is_system_role:
        return Response(
            {'error': f"Cannot delete system role '{role.name}'"},
            status=status.HTTP_400_BAD_REQUEST
        )
    role.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
@require_permission('update', 'roles')
def role_permissions(request, pk):
    """
    Replace the permission set of a role.

    PUT /roles/{id}/permissions/
    - Request body: { "permission_ids": [1, 2, 3] }
    """
    role = get_object_or_404(Role, pk=pk)

    serializer = RolePermissionsUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    set_role_permissions(role, serializer.validated_data['permission_ids'])
    return Response(RoleSerializer(role).data, status=status.HTTP_200_OK)


# ============================================================================
# User Role API Views
# ============================================================================

@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
@require_permission(None, 'users')
def user_roles(request, user_id):
    """
    List or replace the roles bound to a user.

    GET /users/{id}/roles/

    PUT /users/{id}/roles/
    - Request body: { "role_ids": [1, 2] }
    - Needs update:users plus update:roles. Non-admins may only grant or
      remove roles they hold themselves.
    """
    user = get_object_or_404(get_user_model(), pk=user_id)

    if request.method == 'PUT':
        serializer = UserRolesUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        roles = serializer.validated_data['role_ids']
        allowed, reason = can_assign_roles(
            request.user,
            user,
            roles,
            role_names=get_request_role_names(request),
            evaluator=get_request_evaluator(request)
        )
        if not allowed:
            return Response(
                {'error': 'Permission denied', 'detail': reason},
                status=status.HTTP_403_FORBIDDEN
            )
        set_user_roles(user, roles)

    serializer = RoleListSerializer(get_user_roles(user), many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


# ============================================================================
# Current User Authorization Views
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_permissions(request):
    """
    Roles and permission keys of the current user, for UI gating.

    GET /me/permissions/
    """
    role_names = get_request_role_names(request)
    return Response({
        'roles': sorted(role_names),
        'permissions': get_user_permission_keys(request.user, role_names=role_names),
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def check_permission(request):
    """
    Answer an authorization check for the current user.

    POST /check/
    - Request body: { "action": "approve", "resource": "results" }
    - Returns: { "allowed": bool, "reason": str }
    """
    serializer = PermissionCheckSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    action = serializer.validated_data['action']
    resource = serializer.validated_data['resource']
    allowed, reason = user_can_perform_action(
        request.user,
        action,
        resource,
        role_names=get_request_role_names(request),
        evaluator=get_request_evaluator(request)
    )
    return Response({
        'action': action,
        'resource': resource,
        'allowed': allowed,
        'reason': reason,
    }, status=status.HTTP_200_OK)
