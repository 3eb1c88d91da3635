"""
Seed RBAC Data

This management command provisions the authorization catalogs:
- Permissions (action x resource pairs)
- Roles, with their permission bindings rebuilt from the catalog
- Default role for every existing user, matched on user type

Usage:
    python manage.py seed_rbac
    python manage.py seed_rbac --lenient   # skip unknown permission references

This is idempotent - safe to run multiple times.
"""

from django.core.management.base import BaseCommand, CommandError

from core.rbac.catalog import PERMISSION_CATALOG, ROLE_CATALOG
from core.rbac.exceptions import RbacError
from core.rbac.reconciliation import reconcile_rbac


class Command(BaseCommand):
    help = 'Provision RBAC permissions and roles, and assign default user roles'

    def add_arguments(self, parser):
        parser.add_argument(
            '--lenient',
            action='store_true',
            help='Skip role permissions missing from the permission catalog instead of failing',
        )

    def handle(self, *args, **options):
        self.stdout.write('Starting RBAC seeding...\n')

        strict = False if options['lenient'] else None
        try:
            report = reconcile_rbac(PERMISSION_CATALOG, ROLE_CATALOG, strict=strict)
        except RbacError as e:
            self.stdout.write(self.style.ERROR(f'\n❌ Error: {e.message}\n'))
            raise CommandError(e.message) from e

        self.stdout.write(self.style.SUCCESS(
            f"✓ Permissions: {report.permissions_created} created, "
            f"{report.permissions_existing} already existed"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"✓ Roles: {report.roles_created} created, {report.roles_existing} already existed"
        ))
        self.stdout.write(self.style.SUCCESS(
            f"✓ Role permissions: {report.bindings_created} bound "
            f"({report.bindings_removed} previous bindings replaced)"
        ))
        for reference in report.skipped_references:
            self.stdout.write(self.style.WARNING(f"  - Skipped unknown permission: {reference}"))
        self.stdout.write(self.style.SUCCESS(
            f"✓ User roles: {report.users_assigned} assigned, "
            f"{report.users_already_assigned} already assigned, "
            f"{report.users_unmatched} without a matching role"
        ))

        if report.changed:
            self.stdout.write(
                f"\n✨ Changes: {report.permissions_created} permissions, "
                f"{report.roles_created} roles, {report.users_assigned} user roles, "
                f"{report.bindings_changed} role permissions granted or revoked"
            )
        else:
            self.stdout.write("\n✓ All data already exists - role permissions refreshed")

        self.stdout.write(self.style.SUCCESS('\n✅ RBAC seeding complete!\n'))
