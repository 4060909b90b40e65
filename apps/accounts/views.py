from rest_framework import mixins, status, viewsets, serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema

from apps.audit.serializers import AuditLogEntrySerializer
from apps.audit.services import get_client_ip, recent_activity
from .models import User
from .passwords import check_password_strength
from .permissions import CanManageUser, IsAdminRole
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    UserLoginSerializer,
    ChangePasswordSerializer,
    PasswordStrengthInputSerializer,
    PasswordStrengthSerializer,
    ProfileUpdateSerializer,
    UserFilterSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    PasswordResetResponseSerializer,
)
from .services import (
    AccountsServiceError,
    CorruptCredentialError,
    InactiveAccountError,
    InvalidCredentialsError,
    UserNotFoundError,
    UserPermissionError,
    register_user,
    authenticate_user,
    logout_user,
    change_password as change_password_service,
    update_profile as update_profile_service,
    list_users,
    create_user,
    update_user,
    toggle_user_status,
    reset_user_password,
)


ERROR_STATUS = {
    UserNotFoundError: status.HTTP_404_NOT_FOUND,
    UserPermissionError: status.HTTP_403_FORBIDDEN,
    InactiveAccountError: status.HTTP_403_FORBIDDEN,
    CorruptCredentialError: status.HTTP_409_CONFLICT,
}


def error_response(error, default=status.HTTP_400_BAD_REQUEST):
    """Map an accounts service error onto an {'error': ...} response."""
    return Response(
        {'error': str(error)},
        status=ERROR_STATUS.get(type(error), default)
    )


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Refresh token issued at login")


def _tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new apartment user and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    # Remove password_confirm before passing to service
    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(ip_address=get_client_ip(request), **data)
    except AccountsServiceError as e:
        return error_response(e)

    return Response({
        'message': 'Registration successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Authenticate with username and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with username and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            username=serializer.validated_data['username'],
            password=serializer.validated_data['password'],
            ip_address=get_client_ip(request),
        )
    except InvalidCredentialsError as e:
        return error_response(e, status.HTTP_401_UNAUTHORIZED)
    except AccountsServiceError as e:
        return error_response(e)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': _tokens_for(user),
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout; the refresh token, if given, must be well-formed.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout and record the event."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token)
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    logout_user(user=request.user, ip_address=get_client_ip(request))

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=ProfileUpdateSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current user's names, email and preferred language.",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update user profile."""
    serializer = ProfileUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    user = update_profile_service(user=request.user, data=serializer.validated_data)
    return Response(UserSerializer(user).data)


@extend_schema(
    request=ChangePasswordSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Change the current user's password. The new password must score at least Medium.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """Change own password."""
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_password_service(
            user=request.user,
            current_password=serializer.validated_data['current_password'],
            new_password=serializer.validated_data['new_password'],
            ip_address=get_client_ip(request),
        )
    except AccountsServiceError as e:
        return error_response(e)

    return Response({'message': 'Password changed successfully'})


@extend_schema(
    request=PasswordStrengthInputSerializer,
    responses={200: PasswordStrengthSerializer},
    description="Advisory 0-7 strength score with feedback.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def password_strength(request):
    """Score a candidate password without storing it."""
    serializer = PasswordStrengthInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    result = check_password_strength(serializer.validated_data['password'])
    return Response(PasswordStrengthSerializer(result.as_dict()).data)


@extend_schema(
    responses={200: AuditLogEntrySerializer(many=True)},
    description="The current user's 20 most recent audited actions.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_activity(request):
    """Recent activity of the current user."""
    entries = recent_activity(actor=request.user, performed_by=request.user.id, limit=20)
    return Response(AuditLogEntrySerializer(entries, many=True).data)


class UserPagination(PageNumberPagination):
    page_size = 25
    page_size_query_param = 'page_size'
    max_page_size = 100


class UserViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    User management for administrators.

    list: Users visible to the admin (filter by role, apartment, search)
    retrieve: A single user
    create: Create a user inside the admin's scope
    partial_update: Change names, role, apartment or active flag
    toggle_status: Activate/deactivate a user
    reset_password: Generate a new password for a user
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole, CanManageUser]
    pagination_class = UserPagination

    def get_queryset(self):
        filter_serializer = UserFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return list_users(
            actor=self.request.user,
            role=params.get('role'),
            apartment_id=params.get('apartment'),
            search=params.get('search'),
        )

    @extend_schema(request=UserCreateSerializer, responses={201: UserSerializer, 400: ErrorResponseSerializer})
    def create(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = create_user(actor=request.user, **serializer.validated_data)
        except AccountsServiceError as e:
            return error_response(e)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer, 400: ErrorResponseSerializer})
    def partial_update(self, request, pk=None):
        target = self.get_object()
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_user(actor=request.user, user_id=target.pk, data=serializer.validated_data)
        except AccountsServiceError as e:
            return error_response(e)

        return Response(UserSerializer(user).data)

    @extend_schema(request=None, responses={200: UserSerializer, 403: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def toggle_status(self, request, pk=None):
        """
        Activate or deactivate a user.

        POST /api/auth/users/{id}/toggle_status/
        """
        target = self.get_object()
        try:
            user = toggle_user_status(actor=request.user, user_id=target.pk)
        except AccountsServiceError as e:
            return error_response(e)
        return Response(UserSerializer(user).data)

    @extend_schema(request=None, responses={200: PasswordResetResponseSerializer, 403: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def reset_password(self, request, pk=None):
        """
        Replace the user's password with a generated one.

        POST /api/auth/users/{id}/reset_password/
        """
        target = self.get_object()
        try:
            user, new_password = reset_user_password(actor=request.user, user_id=target.pk)
        except AccountsServiceError as e:
            return error_response(e)

        return Response({
            'message': f'Password reset for {user.username}',
            'new_password': new_password,
        })
