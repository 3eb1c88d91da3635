"""
Service layer for RBAC permission checking and role administration.
Contains business logic shared by the decorators, views and commands.
"""
from typing import Dict, Iterable, List, Optional, Set, Tuple

from django.db import transaction

from .catalog import permission_key
from .evaluator import SUPERUSER_ROLE, AuthorizationEvaluator
from .models import Permission, Role, RolePermission, UserRole

REQUEST_ROLE_CACHE_ATTR = '_rbac_role_names'
REQUEST_EVALUATOR_CACHE_ATTR = '_rbac_evaluator'


def get_user_roles(user):
    """
    Get all roles bound to a user.

    Returns:
        QuerySet of Role objects (empty for anonymous users)
    """
    if not user or not user.is_authenticated:
        return Role.objects.none()
    return Role.objects.filter(user_roles__user=user).distinct()


def get_user_role_names(user) -> Set[str]:
    """Project a user's roles onto their names."""
    return set(get_user_roles(user).values_list('name', flat=True))


def get_request_role_names(request) -> Set[str]:
    """
    Role names of the request's user, cached on the request object so
    repeated checks within one request hit the database once.
    """
    cached = getattr(request, REQUEST_ROLE_CACHE_ATTR, None)
    if cached is None:
        cached = get_user_role_names(getattr(request, 'user', None))
        setattr(request, REQUEST_ROLE_CACHE_ATTR, cached)
    return cached


def get_request_evaluator(request) -> AuthorizationEvaluator:
    """
    Evaluator over the grants of the request user's roles, built once per
    request and reused by every check made while serving it.
    """
    cached = getattr(request, REQUEST_EVALUATOR_CACHE_ATTR, None)
    if cached is None:
        cached = AuthorizationEvaluator.from_database(get_request_role_names(request))
        setattr(request, REQUEST_EVALUATOR_CACHE_ATTR, cached)
    return cached


def load_role_grants(role_names: Optional[Iterable[str]] = None) -> Dict[str, Set[Tuple[str, str]]]:
    """
    Load the persisted role -> permission graph.

    Args:
        role_names: restrict to these roles (all roles if None)

    Returns:
        Dict of role name -> set of (action, resource) pairs.
        Roles without bindings map to an empty set.
    """
    roles = Role.objects.all()
    bindings = RolePermission.objects.select_related('role', 'permission')
    if role_names is not None:
        role_names = list(role_names)
        roles = roles.filter(name__in=role_names)
        bindings = bindings.filter(role__name__in=role_names)

    grants = {name: set() for name in roles.values_list('name', flat=True)}
    for binding in bindings:
        grants.setdefault(binding.role.name, set()).add(
            (binding.permission.action, binding.permission.resource)
        )
    return grants


def user_can_perform_action(user, action: str, resource: str, role_names=None,
                            evaluator: Optional[AuthorizationEvaluator] = None) -> Tuple[bool, str]:
    """
    Check if a user can perform an action on a resource.

    Args:
        user: The authenticated user (or None / AnonymousUser)
        action: The action identifier (e.g., 'view', 'approve')
        resource: The resource identifier (e.g., 'results')
        role_names: pre-resolved role names, to avoid another lookup
        evaluator: pre-built evaluator covering role_names, to avoid
            reloading grants

    Returns:
        Tuple of (allowed: bool, reason: str)
    """
    if not user or not user.is_authenticated:
        return False, "Authentication required"

    if role_names is None:
        role_names = get_user_role_names(user)

    if not role_names:
        return False, "User has no roles assigned"

    if evaluator is None:
        evaluator = AuthorizationEvaluator.from_database(role_names)
    if evaluator.is_allowed(role_names, action, resource):
        if SUPERUSER_ROLE in role_names:
            return True, "Permission granted (Admin)"
        return True, "Permission granted"

    names = ', '.join(sorted(role_names))
    return False, f"Your roles ({names}) do not grant '{permission_key(action, resource)}'"


def get_user_permission_keys(user, role_names=None) -> List[str]:
    """
    All "action:resource" keys a user holds. Admins hold every persisted
    permission.
    """
    if role_names is None:
        role_names = get_user_role_names(user)
    if not role_names:
        return []

    permissions = Permission.objects.all()
    if SUPERUSER_ROLE not in role_names:
        permissions = permissions.filter(role_permissions__role__name__in=role_names).distinct()
    return sorted(p.key for p in permissions)


@transaction.atomic
def set_role_permissions(role: Role, permissions: Iterable[Permission]) -> Role:
    """Replace a role's permission set."""
    RolePermission.objects.filter(role=role).delete()
    RolePermission.objects.bulk_create(
        [RolePermission(role=role, permission=p) for p in {p.pk: p for p in permissions}.values()]
    )
    return role


def can_assign_roles(caller, target_user, roles: Iterable[Role], role_names=None,
                     evaluator: Optional[AuthorizationEvaluator] = None) -> Tuple[bool, str]:
    """
    Check whether `caller` may replace `target_user`'s roles with `roles`.

    Admins may assign anything. Anyone else needs update:roles and may only
    grant or remove roles they hold themselves, so no caller can reach
    admin or take it away.

    Returns:
        Tuple of (allowed: bool, reason: str)
    """
    if role_names is None:
        role_names = get_user_role_names(caller)

    if SUPERUSER_ROLE in role_names:
        return True, "Role assignment permitted (Admin)"

    allowed, reason = user_can_perform_action(
        caller, 'update', 'roles', role_names=role_names, evaluator=evaluator
    )
    if not allowed:
        return False, reason

    changed = get_user_role_names(target_user) ^ {role.name for role in roles}
    foreign = sorted(changed - set(role_names))
    if foreign:
        return False, f"Cannot grant or remove roles you do not hold: {', '.join(foreign)}"
    return True, "Role assignment permitted"


@transaction.atomic
def set_user_roles(user, roles: Iterable[Role]):
    """Replace the set of roles bound to a user."""
    UserRole.objects.filter(user=user).delete()
    UserRole.objects.bulk_create(
        [UserRole(user=user, role=r) for r in {r.pk: r for r in roles}.values()]
    )
    return user
