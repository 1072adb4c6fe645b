from rest_framework import status, viewsets, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .models import User
from .permissions import IsManager, IsAdmin
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_tokens,
    update_user_account,
    deactivate_user,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    CannotDeactivateSelfError,
)


# Response serializers for API documentation
class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField(help_text="Carries the operator's role claim")


class SessionResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokenPairSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(max_length=100, allow_blank=True)


def _session(user, message, http_status=status.HTTP_200_OK):
    return Response({
        'message': message,
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    }, status=http_status)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: SessionResponseSerializer, 400: ErrorResponseSerializer},
    description="Self-registration of a read-only operator (role 'user').",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = register_user(
            email=data['email'],
            password=data['password'],
            display_name=data.get('display_name', ''),
        )
    except UserRegistrationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return _session(user, 'Registration successful.', status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: SessionResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Email and password login returning a JWT pair.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError:
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return _session(user, 'Login successful')


@extend_schema(
    request=None,
    responses={200: None},
    description="Stateless logout: the client drops its tokens, which expire on their own.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    return Response({'message': 'Logout successful'})


@extend_schema(
    methods=['PATCH'],
    request=ProfileUpdateSerializer,
    responses={200: UserSerializer},
)
@extend_schema(responses={200: UserSerializer}, tags=['auth'])
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Own profile; operators may only change their display name."""
    if request.method == 'PATCH':
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_user_account(user_id=request.user.id, **serializer.validated_data)
        request.user.refresh_from_db()

    return Response(UserSerializer(request.user).data)


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Dashboard account management.

    list/retrieve: managers and admins
    create/partial_update/destroy: admins only (destroy deactivates)
    """

    queryset = User.objects.all()
    serializer_class = UserSerializer

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [IsAuthenticated(), IsManager()]
        return [IsAuthenticated(), IsAdmin()]

    @extend_schema(request=UserCreateSerializer, responses={201: UserSerializer, 400: ErrorResponseSerializer})
    def create(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = register_user(**serializer.validated_data)
        except UserRegistrationError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserUpdateSerializer, responses={200: UserSerializer, 404: ErrorResponseSerializer})
    def partial_update(self, request, pk=None):
        serializer = UserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = update_user_account(user_id=pk, **serializer.validated_data)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(UserSerializer(user).data)

    @extend_schema(responses={200: UserSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer})
    def destroy(self, request, pk=None):
        try:
            user = deactivate_user(user_id=pk, performed_by=request.user)
        except UserNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except CannotDeactivateSelfError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data)
