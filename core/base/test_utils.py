import io

from django.core.management import call_command

from core.rbac.models import Role, UserRole


def setup_rbac_data():
    """Provision the RBAC catalogs for tests, suppressing command output"""
    if Role.objects.filter(name='admin').exists():
        return

    buffer = io.StringIO()
    call_command('seed_rbac', verbosity=0, stdout=buffer)


def grant_role(user, role_name):
    """Helper to bind a catalog role to a user"""
    if not Role.objects.filter(name=role_name).exists():
        setup_rbac_data()

    role = Role.objects.get(name=role_name)
    UserRole.objects.get_or_create(user=user, role=role)
    return role
