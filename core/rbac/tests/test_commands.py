"""
Tests for the seed_rbac management command.
"""
from dataclasses import replace
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from core.rbac.catalog import PERMISSION_CATALOG, ROLE_CATALOG, RoleEntry
from core.rbac.models import Permission, Role
from core.user_accounts.models import CustomUser


def run_seed(*args):
    out = StringIO()
    call_command('seed_rbac', *args, stdout=out)
    return out.getvalue()


class SeedRbacCommandTests(TestCase):

    def test_seeds_catalogs(self):
        output = run_seed()

        self.assertIn('RBAC seeding complete', output)
        self.assertIn(f'Permissions: {len(PERMISSION_CATALOG)} created', output)
        self.assertEqual(Permission.objects.count(), len(PERMISSION_CATALOG))
        self.assertEqual(Role.objects.count(), len(ROLE_CATALOG))

    def test_rerun_reports_existing_data(self):
        run_seed()

        output = run_seed()

        self.assertIn('All data already exists', output)
        self.assertIn(f'Roles: 0 created, {len(ROLE_CATALOG)} already existed', output)

    def test_assigns_default_roles(self):
        bursar = CustomUser.objects.create_user(
            email='bursar@example.edu', name='Bursar', password='pass', user_type_name='bursar'
        )

        output = run_seed()

        self.assertIn('User roles: 1 assigned', output)
        self.assertTrue(bursar.has_role('bursar'))

    def test_invalid_catalog_fails(self):
        broken = ROLE_CATALOG + (RoleEntry('auditor', 'Auditor', permissions=('audit:payments',)),)

        with mock.patch('core.rbac.management.commands.seed_rbac.ROLE_CATALOG', broken):
            with self.assertRaises(CommandError) as ctx:
                run_seed()

        self.assertIn('audit:payments', str(ctx.exception))
        self.assertEqual(Role.objects.count(), 0)

    def test_lenient_skips_invalid_references(self):
        broken = ROLE_CATALOG + (RoleEntry('auditor', 'Auditor', permissions=('view:payments', 'audit:payments')),)

        with mock.patch('core.rbac.management.commands.seed_rbac.ROLE_CATALOG', broken):
            output = run_seed('--lenient')

        self.assertIn('Skipped unknown permission: auditor:audit:payments', output)
        self.assertEqual(Role.objects.get(name='auditor').permission_keys(), ['view:payments'])

    def test_rerun_reports_revoked_grants(self):
        run_seed()
        trimmed = tuple(
            replace(r, permissions=tuple(k for k in r.permissions if k != 'approve:results'))
            if r.name == 'hod' else r
            for r in ROLE_CATALOG
        )

        with mock.patch('core.rbac.management.commands.seed_rbac.ROLE_CATALOG', trimmed):
            output = run_seed()

        self.assertNotIn('All data already exists', output)
        self.assertIn('1 role permissions granted or revoked', output)
