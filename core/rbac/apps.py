from django.apps import AppConfig


class RbacConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core.rbac'
    label = 'rbac'
    verbose_name = 'Roles and Permissions'
