from django.conf import settings
from rest_framework import status, viewsets, serializers
from rest_framework.decorators import api_view, permission_classes, action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from drf_spectacular.utils import extend_schema
from .models import User
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer,
    UserRegistrationSerializer,
    UserUpdateSerializer,
    UserFilterSerializer,
    UserLoginSerializer,
    PasswordResetRequestSerializer,
    PasswordResetConfirmSerializer,
    SalesTargetSerializer,
    SalesTargetInputSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    request_password_reset as request_password_reset_service,
    confirm_password_reset as confirm_password_reset_service,
    update_user,
    deactivate_user,
    set_sales_target,
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
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
    refresh = serializers.CharField(help_text="Refresh token to blacklist")


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout and blacklist the refresh token.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout and blacklist refresh token."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

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
    request=PasswordResetRequestSerializer,
    responses={200: MessageResponseSerializer},
    description="Request a password reset. Always returns success for security.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def request_password_reset(request):
    """Request password reset token."""
    serializer = PasswordResetRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    response = {'message': 'If the account exists, a password reset link has been sent'}
    try:
        token = request_password_reset_service(email=serializer.validated_data['email'])
    except UserNotFoundError:
        # Don't reveal if email exists
        return Response(response)

    if settings.EXPOSE_RESET_TOKEN:
        response['token'] = token
    return Response(response)


@extend_schema(
    request=PasswordResetConfirmSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Confirm password reset with token and set new password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def confirm_password_reset(request):
    """Confirm password reset with token."""
    serializer = PasswordResetConfirmSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        confirm_password_reset_service(
            token=serializer.validated_data['token'],
            new_password=serializer.validated_data['new_password'],
        )
    except AccountsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Password reset successful'
    })


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    User administration (administrators only).

    list: GET /api/auth/users/
    retrieve: GET /api/auth/users/{id}/
    create: POST /api/auth/users/
    partial_update: PATCH /api/auth/users/{id}/
    destroy: DELETE /api/auth/users/{id}/ (deactivates)
    sales_targets: GET/POST /api/auth/users/{id}/sales-targets/
    """

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdminRole]

    def get_queryset(self):
        filter_serializer = UserFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        filters = filter_serializer.validated_data

        queryset = User.objects.select_related('store')
        if not filters.get('include_inactive'):
            queryset = queryset.filter(is_active=True)
        if filters.get('role'):
            queryset = queryset.filter(role=filters['role'])
        if filters.get('store'):
            queryset = queryset.filter(store_id=filters['store'])
        return queryset

    @extend_schema(request=UserRegistrationSerializer, responses={201: UserSerializer, 400: ErrorResponseSerializer})
    def create(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = register_user(**serializer.validated_data)
        except AccountsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer, 400: ErrorResponseSerializer})
    def partial_update(self, request, pk=None):
        self.get_object()
        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_user(user_id=pk, **serializer.validated_data)
        except AccountsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data)

    def destroy(self, request, pk=None):
        self.get_object()
        try:
            deactivate_user(user_id=pk, performed_by=request.user)
        except AccountsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=SalesTargetInputSerializer,
        responses={200: SalesTargetSerializer(many=True), 201: SalesTargetSerializer},
    )
    @action(detail=True, methods=['get', 'post'], url_path='sales-targets')
    def sales_targets(self, request, pk=None):
        """List or set the user's monthly sales targets."""
        user = self.get_object()

        if request.method == 'GET':
            targets = user.sales_targets.all()
            return Response(SalesTargetSerializer(targets, many=True).data)

        serializer = SalesTargetInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            target = set_sales_target(user=user, **serializer.validated_data)
        except AccountsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SalesTargetSerializer(target).data, status=status.HTTP_201_CREATED)
