# users/views.py
from rest_framework import status, permissions
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet
from rest_framework.mixins import ListModelMixin
from rest_framework.authtoken.models import Token
from django.shortcuts import get_object_or_404
from django.utils.translation import gettext_lazy as _
from drf_spectacular.utils import extend_schema, OpenApiParameter
import logging

from .models import User
from .permissions import IsPlatformAdmin
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    LoginSerializer,
)
from .services import AuthenticationService, UserService
from .exceptions import AuthenticationServiceError

logger = logging.getLogger(__name__)


class AuthViewSet(GenericViewSet):
    """
    ViewSet for authentication endpoints
    """

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        request=UserRegistrationSerializer,
        responses={
            201: {
                'description': 'Registration successful',
                'example': {
                    'message': 'Registration successful',
                    'user': {'id': 'uuid', 'email': 'user@example.com', 'user_type': 'Patient'},
                    'token': 'your-auth-token'
                }
            },
            400: {'description': 'Bad request'}
        },
        description="Register a new patient or psychologist",
        tags=['Authentication']
    )
    @action(detail=False, methods=['post'])
    def register(self, request):
        """
        Register a new user
        POST /api/auth/register/
        """
        serializer = UserRegistrationSerializer(data=request.data)

        if serializer.is_valid():
            try:
                user = serializer.save()
            except AuthenticationServiceError as e:
                return Response({
                    'error': str(e)
                }, status=status.HTTP_400_BAD_REQUEST)

            token, created = Token.objects.get_or_create(user=user)

            return Response({
                'message': _('Registration successful'),
                'user': UserSerializer(user).data,
                'token': token.key
            }, status=status.HTTP_201_CREATED)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @extend_schema(
        request=LoginSerializer,
        responses={
            200: {
                'description': 'Login successful',
                'example': {
                    'message': 'Login successful',
                    'user': {'id': 'uuid', 'email': 'user@example.com', 'user_type': 'Patient'},
                    'token': 'your-auth-token'
                }
            },
            400: {'description': 'Invalid credentials or wrong role'}
        },
        description="User login through the patient, psychologist or admin entry point",
        tags=['Authentication']
    )
    @action(detail=False, methods=['post'])
    def login(self, request):
        """
        User login
        POST /api/auth/login/
        """
        serializer = LoginSerializer(data=request.data, context={'request': request})

        if serializer.is_valid():
            user = serializer.validated_data['user']

            # Create or get token
            token, created = Token.objects.get_or_create(user=user)
            AuthenticationService.record_login(user)

            return Response({
                'message': _('Login successful'),
                'user': UserSerializer(user).data,
                'token': token.key
            }, status=status.HTTP_200_OK)

        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @extend_schema(
        request=None,
        responses={
            200: {'description': 'Logged out successfully'},
            400: {'description': 'Logout failed'}
        },
        description="User logout - deletes authentication token",
        tags=['Authentication']
    )
    @action(detail=False, methods=['post'], permission_classes=[permissions.IsAuthenticated])
    def logout(self, request):
        """
        User logout
        POST /api/auth/logout/
        """
        deleted, _count = Token.objects.filter(user=request.user).delete()
        if not deleted:
            return Response({
                'error': _('Logout failed')
            }, status=status.HTTP_400_BAD_REQUEST)

        return Response({
            'message': _('Logged out successfully')
        }, status=status.HTTP_200_OK)

    @extend_schema(
        responses={
            200: UserSerializer,
        },
        description="Get current authenticated user's profile",
        tags=['Authentication']
    )
    @action(detail=False, methods=['get'], permission_classes=[permissions.IsAuthenticated])
    def me(self, request):
        """
        Get current user profile
        GET /api/auth/me/
        """
        profile_data = UserService.get_user_profile(request.user)
        return Response(profile_data, status=status.HTTP_200_OK)

    @extend_schema(
        request=UserSerializer(partial=True),
        responses={
            200: {
                'description': 'Profile updated successfully',
                'example': {
                    'message': 'Profile updated successfully',
                    'user': {'id': 'uuid', 'email': 'user@example.com', 'user_type': 'Patient'}
                }
            },
            400: {'description': 'Profile update failed'}
        },
        description="Update current user's profile",
        tags=['Authentication']
    )
    @action(detail=False, methods=['patch'], url_path='update-profile',
            permission_classes=[permissions.IsAuthenticated])
    def update_profile(self, request):
        """
        Update current user profile
        PATCH /api/auth/update-profile/
        """
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = UserService.update_user_profile(request.user, **serializer.validated_data)
        return Response({
            'message': _('Profile updated successfully'),
            'user': UserSerializer(user).data
        }, status=status.HTTP_200_OK)


@extend_schema(tags=['User Management'])
class UserViewSet(GenericViewSet, ListModelMixin):
    """
    ViewSet for user management (admin use)
    """
    queryset = User.objects.all().order_by('-created_at')
    serializer_class = UserSerializer
    permission_classes = [IsPlatformAdmin]

    def get_queryset(self):
        queryset = super().get_queryset()
        user_type = self.request.query_params.get('user_type')
        if user_type:
            queryset = queryset.filter(user_type=user_type)
        return queryset

    @extend_schema(
        description="List all users (Admin only)",
        parameters=[
            OpenApiParameter(name='user_type', type=str, description='Filter by Patient, Psychologist or Admin')
        ],
        responses={200: UserSerializer(many=True)}
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        description="Retrieve a user with their sessions and payouts (Admin only)",
        responses={200: {'description': 'User detail with sessions and payouts'}}
    )
    def retrieve(self, request, pk=None):
        user = get_object_or_404(User, pk=pk)
        return Response(UserService.get_user_detail(user), status=status.HTTP_200_OK)
