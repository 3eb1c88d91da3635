"""
Static checks over the permission and role catalogs.
These run without a database and catch typos in role definitions.
"""
from django.test import SimpleTestCase

from core.rbac.catalog import (
    PERMISSION_CATALOG,
    ROLE_CATALOG,
    Action,
    PermissionEntry,
    Resource,
    RoleEntry,
    RoleName,
    find_duplicate_role_names,
    find_unresolved_references,
    parse_permission_key,
    permission_key,
)


class PermissionCatalogTests(SimpleTestCase):

    def test_permission_pairs_are_unique(self):
        pairs = [(p.action, p.resource) for p in PERMISSION_CATALOG]
        self.assertEqual(len(pairs), len(set(pairs)))

    def test_permissions_use_known_vocabulary(self):
        for entry in PERMISSION_CATALOG:
            self.assertIn(entry.action, Action.values)
            self.assertIn(entry.resource, Resource.values)
            self.assertTrue(entry.description)

    def test_entries_are_plain_strings(self):
        """Catalog values must hash like the strings callers pass in"""
        entry = PERMISSION_CATALOG[0]
        self.assertIs(type(entry.action), str)
        self.assertIs(type(entry.resource), str)
        self.assertIs(type(ROLE_CATALOG[0].name), str)


class RoleCatalogTests(SimpleTestCase):

    def test_every_role_reference_resolves(self):
        """Every action:resource in a role has a permission catalog entry"""
        self.assertEqual(find_unresolved_references(PERMISSION_CATALOG, ROLE_CATALOG), {})

    def test_role_names_are_unique(self):
        self.assertEqual(find_duplicate_role_names(ROLE_CATALOG), [])

    def test_catalog_provisions_every_role_name(self):
        self.assertEqual({r.name for r in ROLE_CATALOG}, set(RoleName.values))

    def test_all_catalog_roles_are_system_roles(self):
        self.assertTrue(all(r.is_system_role for r in ROLE_CATALOG))

    def test_admin_holds_every_permission(self):
        admin = next(r for r in ROLE_CATALOG if r.name == 'admin')
        self.assertEqual(set(admin.permissions), {p.key for p in PERMISSION_CATALOG})

    def test_role_grants_match_decision_table(self):
        """Every non-admin role holds exactly its row of the decision table"""
        table = {
            'registrar': {
                'users': ['view', 'create', 'update'],
                'transcripts': ['view', 'create', 'update', 'process'],
                'courses': ['view'],
            },
            'bursar': {
                'users': ['view'],
                'payments': ['view', 'create', 'update'],
            },
            'dean': {
                'users': ['view', 'update'],
                'courses': ['view', 'create', 'update'],
                'results': ['view', 'approve'],
            },
            'hod': {
                'users': ['view', 'update'],
                'courses': ['view', 'create', 'update'],
                'results': ['view', 'approve'],
            },
            'lecturer': {
                'courses': ['view'],
                'results': ['view', 'create', 'update'],
                'attendance': ['view', 'create', 'update'],
            },
            'student': {
                'courses': ['view'],
                'payments': ['view'],
                'results': ['view'],
            },
        }
        roles = {r.name: r for r in ROLE_CATALOG}

        self.assertEqual(set(table) | {'admin'}, set(roles))
        for role_name, row in table.items():
            with self.subTest(role=role_name):
                expected = {
                    permission_key(action, resource)
                    for resource, actions in row.items()
                    for action in actions
                }
                self.assertEqual(set(roles[role_name].permissions), expected)
                self.assertEqual(len(roles[role_name].permissions), len(expected))


class CatalogValidationTests(SimpleTestCase):

    def test_unresolved_reference_is_reported(self):
        permissions = (PermissionEntry('view', 'results', 'View results'),)
        roles = (RoleEntry('hod', 'Head', permissions=('view:results', 'approve:results')),)

        self.assertEqual(
            find_unresolved_references(permissions, roles),
            {'hod': ['approve:results']}
        )

    def test_malformed_reference_is_reported(self):
        permissions = (PermissionEntry('view', 'results', 'View results'),)
        roles = (RoleEntry('hod', 'Head', permissions=('viewresults', ':results', 'view:')),)

        self.assertEqual(
            find_unresolved_references(permissions, roles),
            {'hod': ['viewresults', ':results', 'view:']}
        )

    def test_duplicate_role_names_are_reported_once(self):
        roles = (
            RoleEntry('hod', 'Head'),
            RoleEntry('hod', 'Head again'),
            RoleEntry('hod', 'Head third'),
        )
        self.assertEqual(find_duplicate_role_names(roles), ['hod'])


class PermissionKeyTests(SimpleTestCase):

    def test_build_and_parse(self):
        self.assertEqual(permission_key('approve', 'results'), 'approve:results')
        self.assertEqual(parse_permission_key('approve:results'), ('approve', 'results'))

    def test_rejects_malformed_keys(self):
        for key in ['approve', 'approve:', ':results', 'a:b:c', '']:
            with self.subTest(key=key):
                with self.assertRaises(ValueError):
                    parse_permission_key(key)
