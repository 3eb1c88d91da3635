"""
Tests for the AuthorizationEvaluator.

Tests verify that the evaluator:
- Lets admin do anything
- Follows the seeded decision table for every other role
- Denies by default, for empty role sets and for malformed input
"""
from types import SimpleNamespace

from django.test import SimpleTestCase

from core.rbac.catalog import RoleEntry
from core.rbac.evaluator import AuthorizationEvaluator


class CatalogEvaluatorTests(SimpleTestCase):
    """Decisions over the default role catalog"""

    def setUp(self):
        self.evaluator = AuthorizationEvaluator.from_catalog()

    def test_admin_bypass(self):
        self.assertTrue(self.evaluator.is_allowed({'admin'}, 'delete', 'users'))
        self.assertTrue(self.evaluator.is_allowed({'admin'}, 'launch-nuke', 'missiles'))
        self.assertTrue(self.evaluator.is_allowed({'student', 'admin'}, 'launch-nuke', 'missiles'))

    def test_table_fidelity(self):
        cases = [
            ({'registrar'}, 'create', 'users', True),
            ({'registrar'}, 'delete', 'users', False),
            ({'registrar'}, 'process', 'transcripts', True),
            ({'bursar'}, 'view', 'payments', True),
            ({'bursar'}, 'view', 'results', False),
            ({'lecturer'}, 'create', 'attendance', True),
            ({'lecturer'}, 'approve', 'results', False),
            ({'dean'}, 'approve', 'results', True),
            ({'hod'}, 'create', 'courses', True),
            ({'student'}, 'view', 'results', True),
            ({'student'}, 'create', 'results', False),
            ({'student'}, 'delete', 'users', False),
        ]
        for roles, action, resource, expected in cases:
            with self.subTest(roles=roles, action=action, resource=resource):
                self.assertEqual(self.evaluator.is_allowed(roles, action, resource), expected)

    def test_any_held_role_grants(self):
        self.assertTrue(self.evaluator.is_allowed({'student', 'lecturer'}, 'create', 'results'))
        self.assertTrue(self.evaluator.is_allowed(['bursar', 'registrar'], 'process', 'transcripts'))

    def test_empty_role_set_denied(self):
        self.assertFalse(self.evaluator.is_allowed(set(), 'view', 'dashboard'))
        self.assertFalse(self.evaluator.is_allowed(None, 'view', 'courses'))

    def test_unknown_role_denied(self):
        self.assertFalse(self.evaluator.is_allowed({'janitor'}, 'view', 'courses'))

    def test_malformed_input_denied(self):
        for action, resource in [('', 'users'), ('view', ''), ('  ', 'users'), (None, 'users'), ('view', None)]:
            with self.subTest(action=action, resource=resource):
                self.assertFalse(self.evaluator.is_allowed({'registrar'}, action, resource))
                self.assertFalse(self.evaluator.is_allowed({'admin'}, action, resource))

    def test_accepts_role_objects(self):
        """UI-facing callers hand over role objects rather than names"""
        roles = [SimpleNamespace(name='lecturer')]
        self.assertTrue(self.evaluator.is_allowed(roles, 'update', 'attendance'))
        self.assertTrue(self.evaluator.is_allowed([SimpleNamespace(name='admin')], 'delete', 'roles'))

    def test_allowed_pairs_unions_roles(self):
        pairs = self.evaluator.allowed_pairs(['student', 'bursar'])
        self.assertIn(('view', 'results'), pairs)
        self.assertIn(('create', 'payments'), pairs)
        self.assertNotIn(('view', 'transcripts'), pairs)


class CustomGrantEvaluatorTests(SimpleTestCase):
    """Evaluators built from explicit grants"""

    def test_grants_come_only_from_constructor(self):
        evaluator = AuthorizationEvaluator({'hod': [('view', 'results')]})

        self.assertTrue(evaluator.is_allowed({'hod'}, 'view', 'results'))
        self.assertFalse(evaluator.is_allowed({'hod'}, 'approve', 'results'))

    def test_from_catalog_ignores_unparseable_keys(self):
        catalog = (RoleEntry('hod', 'Head', permissions=('view:results', 'garbage')),)
        evaluator = AuthorizationEvaluator.from_catalog(catalog)

        self.assertEqual(evaluator.grants_for('hod'), frozenset({('view', 'results')}))

    def test_constructor_input_is_copied(self):
        grants = {'hod': [('view', 'results')]}
        evaluator = AuthorizationEvaluator(grants)
        grants['hod'].append(('approve', 'results'))

        self.assertFalse(evaluator.is_allowed({'hod'}, 'approve', 'results'))
