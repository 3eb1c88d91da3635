"""
RBAC Catalog - Hardcoded Setup
==============================

Defines the foundational structure for the authorization system:
- Actions and resources (closed vocabularies)
- Permission catalog: every allowed (action, resource) pair
- Role catalog: named bundles of "action:resource" permission keys

This data is provisioned into the database by the `seed_rbac` management
command. No fixtures needed - this is the source of truth.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from django.db import models


# ============================================================================
# VOCABULARIES
# ============================================================================

class Action(models.TextChoices):
    """Operations that can be performed on a resource."""
    VIEW = 'view', 'View'
    CREATE = 'create', 'Create'
    UPDATE = 'update', 'Update'
    DELETE = 'delete', 'Delete'
    PROCESS = 'process', 'Process'
    APPROVE = 'approve', 'Approve'
    UPLOAD = 'upload', 'Upload'
    PUBLISH = 'publish', 'Publish'


class Resource(models.TextChoices):
    """Functional areas protected by permissions."""
    DASHBOARD = 'dashboard', 'Dashboard'
    USERS = 'users', 'Users'
    TRANSCRIPTS = 'transcripts', 'Transcripts'
    COURSES = 'courses', 'Courses'
    PAYMENTS = 'payments', 'Payments'
    RESULTS = 'results', 'Results'
    ATTENDANCE = 'attendance', 'Attendance'
    FEES = 'fees', 'Fees'
    ROLES = 'roles', 'Roles'
    PERMISSIONS = 'permissions', 'Permissions'


class RoleName(models.TextChoices):
    """Role identifiers provisioned by the catalog."""
    ADMIN = 'admin', 'Administrator'
    REGISTRAR = 'registrar', 'Registrar'
    BURSAR = 'bursar', 'Bursar'
    DEAN = 'dean', 'Dean'
    HOD = 'hod', 'Head of Department'
    LECTURER = 'lecturer', 'Lecturer'
    STUDENT = 'student', 'Student'


PERMISSION_KEY_SEPARATOR = ':'


def permission_key(action: str, resource: str) -> str:
    """Build the "action:resource" reference used in role definitions."""
    return f"{action}{PERMISSION_KEY_SEPARATOR}{resource}"


def parse_permission_key(key: str) -> Tuple[str, str]:
    """
    Split an "action:resource" reference into its two parts.

    Raises:
        ValueError: if the key is not exactly two non-empty tokens
    """
    action, sep, resource = key.partition(PERMISSION_KEY_SEPARATOR)
    if not sep or not action or not resource or PERMISSION_KEY_SEPARATOR in resource:
        raise ValueError(f"Malformed permission key: '{key}'")
    return action, resource


@dataclass(frozen=True)
class PermissionEntry:
    action: str
    resource: str
    description: str

    @property
    def key(self) -> str:
        return permission_key(self.action, self.resource)


@dataclass(frozen=True)
class RoleEntry:
    name: str
    description: str
    is_system_role: bool = True
    permissions: Tuple[str, ...] = field(default_factory=tuple)


# ============================================================================
# PERMISSIONS
# ============================================================================

def _entries(resource: str, actions: Iterable[Tuple[str, str]]) -> List[PermissionEntry]:
    return [
        PermissionEntry(action=action.value, resource=resource.value, description=description)
        for action, description in actions
    ]


PERMISSION_CATALOG: Tuple[PermissionEntry, ...] = tuple(
    _entries(Resource.DASHBOARD, [
        (Action.VIEW, 'View dashboard'),
    ])
    + _entries(Resource.USERS, [
        (Action.VIEW, 'View users'),
        (Action.CREATE, 'Create users'),
        (Action.UPDATE, 'Update users'),
        (Action.DELETE, 'Delete users'),
    ])
    + _entries(Resource.TRANSCRIPTS, [
        (Action.VIEW, 'View transcripts'),
        (Action.CREATE, 'Create transcripts'),
        (Action.UPDATE, 'Update transcripts'),
        (Action.PROCESS, 'Process transcript requests'),
    ])
    + _entries(Resource.COURSES, [
        (Action.VIEW, 'View courses'),
        (Action.CREATE, 'Create courses'),
        (Action.UPDATE, 'Update courses'),
        (Action.DELETE, 'Delete courses'),
    ])
    + _entries(Resource.PAYMENTS, [
        (Action.VIEW, 'View payments'),
        (Action.CREATE, 'Record payments'),
        (Action.UPDATE, 'Update payments'),
    ])
    + _entries(Resource.RESULTS, [
        (Action.VIEW, 'View results'),
        (Action.CREATE, 'Create results'),
        (Action.UPDATE, 'Update results'),
        (Action.UPLOAD, 'Upload results'),
        (Action.APPROVE, 'Approve results'),
        (Action.PUBLISH, 'Publish results'),
    ])
    + _entries(Resource.ATTENDANCE, [
        (Action.VIEW, 'View attendance'),
        (Action.CREATE, 'Record attendance'),
        (Action.UPDATE, 'Update attendance'),
    ])
    + _entries(Resource.FEES, [
        (Action.VIEW, 'View fee structures'),
    ])
    + _entries(Resource.ROLES, [
        (Action.VIEW, 'View roles'),
        (Action.CREATE, 'Create roles'),
        (Action.UPDATE, 'Change role permissions'),
        (Action.DELETE, 'Delete roles'),
    ])
    + _entries(Resource.PERMISSIONS, [
        (Action.VIEW, 'View permissions'),
    ])
)


# ============================================================================
# ROLES
# ============================================================================

def _grants(matrix: Dict[str, Iterable[str]]) -> Tuple[str, ...]:
    """Flatten a {resource: [actions]} row into permission keys."""
    return tuple(
        permission_key(action.value, resource.value)
        for resource, actions in matrix.items()
        for action in actions
    )


ROLE_CATALOG: Tuple[RoleEntry, ...] = (
    RoleEntry(
        name=RoleName.ADMIN.value,
        description='Administrator with full access to the portal',
        permissions=tuple(entry.key for entry in PERMISSION_CATALOG),
    ),
    RoleEntry(
        name=RoleName.REGISTRAR.value,
        description='Manages student records and transcripts',
        permissions=_grants({
            Resource.USERS: [Action.VIEW, Action.CREATE, Action.UPDATE],
            Resource.TRANSCRIPTS: [Action.VIEW, Action.CREATE, Action.UPDATE, Action.PROCESS],
            Resource.COURSES: [Action.VIEW],
        }),
    ),
    RoleEntry(
        name=RoleName.BURSAR.value,
        description='Manages fees and student payments',
        permissions=_grants({
            Resource.USERS: [Action.VIEW],
            Resource.PAYMENTS: [Action.VIEW, Action.CREATE, Action.UPDATE],
        }),
    ),
    RoleEntry(
        name=RoleName.DEAN.value,
        description='Dean of faculty',
        permissions=_grants({
            Resource.USERS: [Action.VIEW, Action.UPDATE],
            Resource.COURSES: [Action.VIEW, Action.CREATE, Action.UPDATE],
            Resource.RESULTS: [Action.VIEW, Action.APPROVE],
        }),
    ),
    RoleEntry(
        name=RoleName.HOD.value,
        description='Head of department',
        permissions=_grants({
            Resource.USERS: [Action.VIEW, Action.UPDATE],
            Resource.COURSES: [Action.VIEW, Action.CREATE, Action.UPDATE],
            Resource.RESULTS: [Action.VIEW, Action.APPROVE],
        }),
    ),
    RoleEntry(
        name=RoleName.LECTURER.value,
        description='Teaches courses, records results and attendance',
        permissions=_grants({
            Resource.COURSES: [Action.VIEW],
            Resource.RESULTS: [Action.VIEW, Action.CREATE, Action.UPDATE],
            Resource.ATTENDANCE: [Action.VIEW, Action.CREATE, Action.UPDATE],
        }),
    ),
    RoleEntry(
        name=RoleName.STUDENT.value,
        description='Enrolled student',
        permissions=_grants({
            Resource.COURSES: [Action.VIEW],
            Resource.PAYMENTS: [Action.VIEW],
            Resource.RESULTS: [Action.VIEW],
        }),
    ),
)


# ============================================================================
# VALIDATION
# ============================================================================

def find_unresolved_references(permission_catalog, role_catalog) -> Dict[str, List[str]]:
    """
    Find role permission keys that have no matching permission entry.

    Returns:
        Dict of role name -> list of unresolved keys (roles with none are omitted)
    """
    known = {(entry.action, entry.resource) for entry in permission_catalog}
    unresolved = {}
    for role in role_catalog:
        missing = []
        for key in role.permissions:
            try:
                pair = parse_permission_key(key)
            except ValueError:
                missing.append(key)
                continue
            if pair not in known:
                missing.append(key)
        if missing:
            unresolved[role.name] = missing
    return unresolved


def find_duplicate_role_names(role_catalog) -> List[str]:
    seen = set()
    duplicates = []
    for role in role_catalog:
        if role.name in seen and role.name not in duplicates:
            duplicates.append(role.name)
        seen.add(role.name)
    return duplicates
