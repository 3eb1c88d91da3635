from django.contrib.auth import authenticate
from rest_framework import serializers

from core.rbac.services import get_user_role_names
from .models import CustomUser


class UserSummarySerializer(serializers.ModelSerializer):
    """User payload returned on login, with the names of the roles held"""
    user_type = serializers.CharField(source='user_type.type_name', read_only=True)
    roles = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'user_type', 'roles']
        read_only_fields = fields

    def get_roles(self, obj):
        return sorted(get_user_role_names(obj))


class LoginSerializer(serializers.Serializer):
    """
    Email/password credentials.
    On success `validated_data['user']` holds the authenticated user,
    otherwise `user` is None.
    """
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False, write_only=True)

    def validate(self, attrs):
        attrs['user'] = authenticate(
            self.context.get('request'),
            username=attrs['email'],
            password=attrs['password'],
        )
        return attrs
