"""
User Account Models
Handles user authentication and classification by user type.
Authorization roles live in core.rbac and are bound through UserRole.
"""
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models


class UserType(models.Model):
    """
    User type model classifying portal users (student, lecturer, bursar, ...).
    The RBAC seeding assigns each user the role named after their type.
    """
    type_name = models.CharField(max_length=50, unique=True, db_index=True)
    description = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'user_types'
        verbose_name = 'User Type'
        verbose_name_plural = 'User Types'

    def __str__(self):
        return self.type_name


class CustomUserManager(BaseUserManager):
    """Creates users keyed by email, classified by user type."""

    USER_TYPE_DESCRIPTIONS = {
        'student': 'Enrolled student',
        'lecturer': 'Academic staff member',
        'hod': 'Head of department',
        'dean': 'Dean of faculty',
        'registrar': 'Registry staff',
        'bursar': 'Bursary staff',
        'admin': 'System administrator',
        'applicant': 'Prospective student with a pending application',
        'alumni': 'Graduated student',
    }

    def create_user(self, email, name, phone_number='', password=None, user_type_name='student', **extra_fields):
        """
        Create a portal user. The UserType row is created on first use,
        so a fresh database needs no user type fixtures.

        user_type_name also selects the default RBAC role that `seed_rbac`
        binds (student, lecturer, hod, dean, registrar, bursar, admin).
        """
        if not email:
            raise ValueError('Email is required')
        if not name:
            raise ValueError('Name is required')

        email = self.normalize_email(email)

        user_type, _ = UserType.objects.get_or_create(
            type_name=user_type_name,
            defaults={'description': self.USER_TYPE_DESCRIPTIONS.get(user_type_name, '')}
        )

        user = self.model(
            email=email,
            name=name,
            phone_number=phone_number,
            user_type=user_type,
            **extra_fields
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, phone_number='', password=None, **extra_fields):
        """
        Create and save an admin user.
        Required by Django for the createsuperuser management command.
        Run `seed_rbac` afterwards to bind the admin role.
        """
        return self.create_user(
            email=email,
            name=name,
            phone_number=phone_number,
            password=password,
            user_type_name='admin',
            **extra_fields
        )


class CustomUser(AbstractBaseUser):
    """Portal user with email authentication"""
    email = models.EmailField(unique=True, db_index=True)
    name = models.CharField(max_length=255)
    phone_number = models.CharField(max_length=15, blank=True, default='')
    is_active = models.BooleanField(default=True)
    date_joined = models.DateTimeField(auto_now_add=True)

    user_type = models.ForeignKey(
        UserType,
        on_delete=models.PROTECT,
        related_name='users'
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        db_table = 'custom_users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        ordering = ['email']

    def __str__(self):
        return f"{self.name} ({self.email})"

    @property
    def type_name(self):
        return self.user_type.type_name

    def has_role(self, role_name):
        """Check if the user is bound to the named RBAC role."""
        return self.user_roles.filter(role__name=role_name).exists()

    # Django admin site integration: staff access follows the RBAC admin role

    @property
    def is_staff(self):
        return self.is_active and self.has_role('admin')

    def has_perm(self, perm, obj=None):
        return self.is_staff

    def has_module_perms(self, app_label):
        return self.is_staff
