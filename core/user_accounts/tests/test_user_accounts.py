"""
Test suite for the user_accounts app.
Tests the user manager, role helpers and the authentication endpoints.
"""
from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from core.base.test_utils import grant_role, setup_rbac_data
from core.user_accounts.models import UserType


User = get_user_model()


class UserTypeModelTest(TestCase):
    """Test UserType model functionality"""

    def test_user_type_creation(self):
        user_type = UserType.objects.create(type_name='visiting', description='Visiting scholar')
        self.assertEqual(str(user_type), 'visiting')
        self.assertEqual(UserType._meta.db_table, 'user_types')

    def test_user_type_unique_constraint(self):
        UserType.objects.create(type_name='visiting')
        with self.assertRaises(Exception):
            UserType.objects.create(type_name='visiting')


class CustomUserManagerTest(TestCase):
    """Test CustomUserManager functionality"""

    def test_create_user_defaults_to_student(self):
        user = User.objects.create_user(
            email='Test@Example.EDU',
            name='Test User',
            password='TestPass123'
        )
        self.assertEqual(user.email, 'Test@example.edu')
        self.assertEqual(user.type_name, 'student')
        self.assertEqual(user.user_type.description, 'Enrolled student')
        self.assertTrue(user.check_password('TestPass123'))

    def test_create_user_reuses_user_type(self):
        User.objects.create_user(email='a@example.edu', name='A', user_type_name='lecturer')
        User.objects.create_user(email='b@example.edu', name='B', user_type_name='lecturer')
        self.assertEqual(UserType.objects.filter(type_name='lecturer').count(), 1)

    def test_create_superuser_is_admin_type(self):
        user = User.objects.create_superuser(
            email='super@example.edu',
            name='Super Admin',
            password='SuperPass123'
        )
        self.assertEqual(user.type_name, 'admin')

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', name='No Email', password='pass')

    def test_name_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='noname@example.edu', name='', password='pass')


class CustomUserRoleTest(TestCase):
    """Role helpers on the user model"""

    def setUp(self):
        setup_rbac_data()
        self.user = User.objects.create_user(email='hod@example.edu', name='HOD', password='pass', user_type_name='hod')

    def test_has_role(self):
        self.assertFalse(self.user.has_role('hod'))
        grant_role(self.user, 'hod')
        self.assertTrue(self.user.has_role('hod'))

    def test_staff_access_follows_admin_role(self):
        self.assertFalse(self.user.is_staff)
        grant_role(self.user, 'admin')
        self.assertTrue(self.user.is_staff)
        self.assertTrue(self.user.has_module_perms('rbac'))

    def test_inactive_admin_is_not_staff(self):
        grant_role(self.user, 'admin')
        self.user.is_active = False
        self.assertFalse(self.user.is_staff)


class LoginAPITest(APITestCase):
    """Test the login and token refresh endpoints"""

    def setUp(self):
        setup_rbac_data()
        self.user = User.objects.create_user(
            email='lecturer@example.edu',
            name='Lecturer',
            password='LecturerPass123',
            user_type_name='lecturer'
        )
        grant_role(self.user, 'lecturer')
        self.login_url = '/auth/login/'

    def test_login_success(self):
        response = self.client.post(self.login_url, {
            'email': 'lecturer@example.edu',
            'password': 'LecturerPass123'
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertEqual(response.data['user']['roles'], ['lecturer'])
        self.assertEqual(response.data['user']['user_type'], 'lecturer')
        self.assertIn('access', response.data['tokens'])
        self.assertIn('refresh', response.data['tokens'])

    def test_login_wrong_password(self):
        response = self.client.post(self.login_url, {
            'email': 'lecturer@example.edu',
            'password': 'wrong'
        })
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_missing_fields(self):
        response = self.client.post(self.login_url, {'email': 'lecturer@example.edu'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()

        response = self.client.post(self.login_url, {
            'email': 'lecturer@example.edu',
            'password': 'LecturerPass123'
        })
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates_rbac_endpoints(self):
        login = self.client.post(self.login_url, {
            'email': 'lecturer@example.edu',
            'password': 'LecturerPass123'
        })
        access = login.data['tokens']['access']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
        response = self.client.post('/core/rbac/check/', {'action': 'create', 'resource': 'attendance'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['allowed'])

    def test_token_refresh(self):
        login = self.client.post(self.login_url, {
            'email': 'lecturer@example.edu',
            'password': 'LecturerPass123'
        })

        response = self.client.post('/auth/token/refresh/', {'refresh': login.data['tokens']['refresh']})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
