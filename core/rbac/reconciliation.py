"""
Reconciliation of the RBAC catalogs into the database.

Makes persisted Permission/Role/RolePermission/UserRole state match the
catalogs without touching unrelated data. Safe to run any number of times.

Algorithm:
    1. Upsert permissions by (action, resource); descriptions are never updated
    2. Upsert roles by name, then replace each role's permission bindings
       with the catalog-declared set
    3. Bind every existing user to the role named after their user type,
       if they don't already hold it (additive only)

The whole run executes in one transaction.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction

from .catalog import (
    PERMISSION_CATALOG,
    ROLE_CATALOG,
    find_duplicate_role_names,
    find_unresolved_references,
    parse_permission_key,
)
from .exceptions import CatalogReferenceError, PersistenceError
from .models import Permission, Role, RolePermission, UserRole

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationReport:
    permissions_created: int = 0
    permissions_existing: int = 0
    roles_created: int = 0
    roles_existing: int = 0
    bindings_removed: int = 0
    bindings_created: int = 0
    bindings_changed: int = 0
    skipped_references: List[str] = field(default_factory=list)
    users_assigned: int = 0
    users_already_assigned: int = 0
    users_unmatched: int = 0

    @property
    def changed(self) -> bool:
        return bool(
            self.permissions_created or self.roles_created
            or self.bindings_changed or self.users_assigned
        )


def reconcile_rbac(permission_catalog=PERMISSION_CATALOG, role_catalog=ROLE_CATALOG,
                   strict: Optional[bool] = None) -> ReconciliationReport:
    """
    Provision the permission and role catalogs and assign default user roles.

    Args:
        permission_catalog: iterable of PermissionEntry
        role_catalog: iterable of RoleEntry
        strict: fail on unresolved permission references instead of skipping
            them. Defaults to settings.RBAC_STRICT_RECONCILIATION.

    Returns:
        ReconciliationReport with per-step counts

    Raises:
        CatalogReferenceError: strict mode and the catalogs are inconsistent
        PersistenceError: any database failure; nothing is committed
    """
    if strict is None:
        strict = getattr(settings, 'RBAC_STRICT_RECONCILIATION', True)

    if strict:
        _check_catalogs(permission_catalog, role_catalog)

    report = ReconciliationReport()
    try:
        with transaction.atomic():
            index = _upsert_permissions(permission_catalog, report)
            for role_entry in role_catalog:
                _sync_role(role_entry, index, report)
            _assign_default_roles(report)
    except DatabaseError as exc:
        logger.error("RBAC reconciliation aborted: %s", exc)
        raise PersistenceError(f"RBAC reconciliation failed: {exc}") from exc

    logger.info(
        "RBAC reconciliation complete: %d permissions created, %d roles created, "
        "%d bindings created, %d users assigned",
        report.permissions_created,
        report.roles_created,
        report.bindings_created,
        report.users_assigned,
    )
    return report


def _check_catalogs(permission_catalog, role_catalog):
    duplicates = find_duplicate_role_names(role_catalog)
    unresolved = find_unresolved_references(permission_catalog, role_catalog)
    if not duplicates and not unresolved:
        return

    problems = []
    if duplicates:
        problems.append(f"duplicate role names: {', '.join(duplicates)}")
    for role_name, keys in unresolved.items():
        problems.append(f"role '{role_name}' references unknown permissions: {', '.join(keys)}")
    raise CatalogReferenceError(
        "Invalid RBAC catalog - " + "; ".join(problems),
        unresolved=unresolved,
        duplicates=duplicates,
    )


def _upsert_permissions(permission_catalog, report) -> Dict[Tuple[str, str], Permission]:
    index = {}
    for entry in permission_catalog:
        permission, created = Permission.objects.get_or_create(
            action=entry.action,
            resource=entry.resource,
            defaults={'description': entry.description}
        )
        if created:
            report.permissions_created += 1
        else:
            report.permissions_existing += 1
        index[(entry.action, entry.resource)] = permission

    logger.info(
        "Permissions: %d created, %d already existed",
        report.permissions_created,
        report.permissions_existing,
    )
    return index


def _sync_role(role_entry, index, report) -> Role:
    role, created = Role.objects.get_or_create(
        name=role_entry.name,
        defaults={
            'description': role_entry.description,
            'is_system_role': role_entry.is_system_role,
        }
    )
    if created:
        report.roles_created += 1
    else:
        report.roles_existing += 1

    previous = set(
        RolePermission.objects.filter(role=role).values_list('permission_id', flat=True)
    )
    removed, _ = RolePermission.objects.filter(role=role).delete()
    report.bindings_removed += removed

    permissions = []
    for key in dict.fromkeys(role_entry.permissions):
        try:
            permission = index.get(parse_permission_key(key))
        except ValueError:
            permission = None
        if permission is None:
            logger.warning("Role '%s': skipping unknown permission '%s'", role.name, key)
            report.skipped_references.append(f"{role.name}:{key}")
            continue
        permissions.append(permission)

    RolePermission.objects.bulk_create(
        [RolePermission(role=role, permission=permission) for permission in permissions]
    )
    report.bindings_created += len(permissions)
    # grants added or revoked compared with the previous run
    report.bindings_changed += len(previous ^ {p.pk for p in permissions})

    logger.info(
        "Role '%s' (%s): %d permissions bound, %d previous bindings removed",
        role.name,
        'created' if created else 'existing',
        len(permissions),
        removed,
    )
    return role


def _assign_default_roles(report):
    roles_by_name = {role.name: role for role in Role.objects.all()}
    users = get_user_model().objects.select_related('user_type').all()

    for user in users:
        role = roles_by_name.get(user.user_type.type_name)
        if role is None:
            logger.debug("User %s: no role matches user type '%s'", user.pk, user.user_type.type_name)
            report.users_unmatched += 1
            continue

        _, created = UserRole.objects.get_or_create(user=user, role=role)
        if created:
            report.users_assigned += 1
        else:
            report.users_already_assigned += 1

    logger.info(
        "User roles: %d assigned, %d already assigned, %d without a matching role",
        report.users_assigned,
        report.users_already_assigned,
        report.users_unmatched,
    )
