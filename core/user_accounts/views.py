"""
Authentication endpoints.
Exchange email/password credentials for a JWT pair.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import LoginSerializer, UserSummarySerializer


def _token_pair(user):
    refresh = RefreshToken.for_user(user)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    POST /auth/login/
    - Request body: { "email": "...", "password": "..." }
    - Returns: the user (with role names) and a refresh/access token pair

    Inactive accounts are rejected like wrong passwords.
    """
    serializer = LoginSerializer(data=request.data, context={'request': request})
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.validated_data['user']
    if user is None:
        return Response({'error': 'Invalid email or password'}, status=status.HTTP_401_UNAUTHORIZED)

    return Response({
        'message': 'Login successful',
        'user': UserSummarySerializer(user).data,
        'tokens': _token_pair(user),
    }, status=status.HTTP_200_OK)
