from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Q
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsManager, IsManagerOrReadOnly
from apps.payments.models import Payment
from apps.payments.serializers import PaymentSerializer
from apps.notifications.services import (
    get_notification_sender,
    NotificationType,
    ConsentRequiredError,
    MissingPhoneError,
    EmptyMessageError,
    TransportError,
)
from apps.notifications.serializers import SendMessageInputSerializer, NotificationSerializer

from .models import Resident, Token
from .serializers import (
    ResidentSerializer,
    ResidentListSerializer,
    ResidentFilterSerializer,
    ResidentInputSerializer,
    BulkResidentRowSerializer,
    TokenSerializer,
    TokenInputSerializer,
    TokenUpdateSerializer,
)
from .services import (
    create_resident,
    bulk_create_residents,
    update_resident,
    delete_resident,
    create_token,
    update_token,
    delete_token,
    ResidentNotFoundError,
    DuplicateCedulaError,
    TokenNotFoundError,
)


# Response serializers for API documentation
class BulkUploadResponseSerializer(drf_serializers.Serializer):
    inserted = drf_serializers.IntegerField()
    errors = drf_serializers.IntegerField()
    error_details = drf_serializers.ListField(child=drf_serializers.DictField())


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class ResidentPagination(PageNumberPagination):
    """Custom pagination for residents."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class ResidentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Resident CRUD operations.

    Business rules live in services; views are thin HTTP handlers.

    list: Residents (filter by payment_status, search, has_tokens)
    create: Register a resident (starts pending)
    retrieve: Resident with tokens
    update/partial_update: Edit identity and contact fields
    destroy: Delete resident and dependent records
    """

    queryset = Resident.objects.prefetch_related('tokens')
    serializer_class = ResidentSerializer
    permission_classes = [IsAuthenticated, IsManagerOrReadOnly]
    pagination_class = ResidentPagination
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        """Filter residents using input serializer validation."""
        queryset = super().get_queryset()

        filter_serializer = ResidentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'payment_status' in params:
            queryset = queryset.filter(payment_status=params['payment_status'])

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(last_name__icontains=search) |
                Q(cedula__icontains=search) |
                Q(registration_number__icontains=search)
            )

        has_tokens = params.get('has_tokens')
        if has_tokens is True:
            queryset = queryset.filter(tokens__isnull=False).distinct()
        elif has_tokens is False:
            queryset = queryset.filter(tokens__isnull=True)

        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return ResidentListSerializer
        return ResidentSerializer

    @extend_schema(request=ResidentInputSerializer, responses={201: ResidentSerializer, 400: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Register a resident."""
        serializer = ResidentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            resident = create_resident(**serializer.validated_data)
        except DuplicateCedulaError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ResidentSerializer(resident).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ResidentInputSerializer, responses={200: ResidentSerializer, 400: ErrorResponseSerializer})
    def update(self, request, *args, **kwargs):
        """Edit identity and contact fields."""
        partial = kwargs.pop('partial', False)
        serializer = ResidentInputSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            resident = update_resident(resident_id=self.kwargs['pk'], **serializer.validated_data)
        except ResidentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateCedulaError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ResidentSerializer(resident).data)

    def destroy(self, request, *args, **kwargs):
        """Delete a resident (cascades to payments, tokens, notifications)."""
        try:
            delete_resident(resident_id=self.kwargs['pk'])
        except ResidentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        """
        Payment history of a resident, newest first.

        GET /api/residents/{id}/payments/
        """
        resident = self.get_object()
        payments = Payment.objects.filter(resident=resident).order_by('-created_at')
        return Response(PaymentSerializer(payments, many=True).data)

    @action(detail=True, methods=['get'])
    def tokens(self, request, pk=None):
        """
        Tokens of a resident, newest first.

        GET /api/residents/{id}/tokens/
        """
        resident = self.get_object()
        tokens = resident.tokens.all()
        return Response(TokenSerializer(tokens, many=True).data)

    @extend_schema(request=SendMessageInputSerializer, responses={200: None, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer, 503: ErrorResponseSerializer})
    @action(detail=True, methods=['post'], url_path='send-whatsapp',
            permission_classes=[IsAuthenticated, IsManager])
    def send_whatsapp(self, request, pk=None):
        """
        Send a custom WhatsApp message to one resident.

        POST /api/residents/{id}/send-whatsapp/
        Body: {"message": "Hola {name}, ..."}
        """
        resident = self.get_object()

        input_serializer = SendMessageInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        sender = get_notification_sender()
        try:
            sent = sender.send_direct(resident, input_serializer.validated_data.get('message', ''))
        except ConsentRequiredError as e:
            return Response({'error': str(e), 'code': 'consent_required'}, status=status.HTTP_403_FORBIDDEN)
        except EmptyMessageError as e:
            return Response({'error': str(e), 'code': 'empty_message'}, status=status.HTTP_400_BAD_REQUEST)
        except MissingPhoneError as e:
            return Response({'error': str(e), 'code': 'missing_phone'}, status=status.HTTP_400_BAD_REQUEST)
        except TransportError as e:
            return Response({'error': str(e), 'code': 'notification_failed'}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        if not sent:
            return Response(
                {'error': 'WhatsApp message could not be delivered', 'code': 'notification_failed'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )

        return Response({'message': 'WhatsApp message sent', 'type': NotificationType.WHATSAPP})

    @extend_schema(request=SendMessageInputSerializer, responses={201: NotificationSerializer, 400: ErrorResponseSerializer})
    @action(detail=True, methods=['post'], url_path='send-alert',
            permission_classes=[IsAuthenticated, IsManager])
    def send_alert(self, request, pk=None):
        """
        Record an in-app alert for a resident (nothing is sent).

        POST /api/residents/{id}/send-alert/
        """
        resident = self.get_object()

        input_serializer = SendMessageInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            notification = get_notification_sender().record_alert(
                resident, input_serializer.validated_data.get('message', '')
            )
        except EmptyMessageError as e:
            return Response({'error': str(e), 'code': 'empty_message'}, status=status.HTTP_400_BAD_REQUEST)

        return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)


class TokenViewSet(viewsets.ModelViewSet):
    """
    ViewSet for access tokens.

    Payment fields are read-only; they follow the owning resident.
    """

    queryset = Token.objects.select_related('resident')
    serializer_class = TokenSerializer
    permission_classes = [IsAuthenticated, IsManagerOrReadOnly]
    pagination_class = ResidentPagination
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = super().get_queryset()
        resident_id = self.request.query_params.get('resident')
        if resident_id and resident_id.isdigit():
            queryset = queryset.filter(resident_id=int(resident_id))
        return queryset

    @extend_schema(request=TokenInputSerializer, responses={201: TokenSerializer, 404: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        serializer = TokenInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            token = create_token(
                resident_id=serializer.validated_data['resident'],
                name=serializer.validated_data['name'],
            )
        except ResidentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(TokenSerializer(token).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=TokenUpdateSerializer, responses={200: TokenSerializer, 404: ErrorResponseSerializer})
    def update(self, request, *args, **kwargs):
        serializer = TokenUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            token = update_token(token_id=self.kwargs['pk'], **serializer.validated_data)
        except TokenNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(TokenSerializer(token).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_token(token_id=self.kwargs['pk'])
        except TokenNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    request=BulkResidentRowSerializer(many=True),
    responses={
        200: BulkUploadResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Create many residents at once; failing rows are reported, not fatal.",
    tags=['residents'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsManager])
def bulk_upload(request):
    """Bulk resident registration."""
    rows = request.data
    if not isinstance(rows, list) or not rows:
        return Response({'error': 'Expected a non-empty list of residents'}, status=status.HTTP_400_BAD_REQUEST)

    result = bulk_create_residents(rows=rows)
    return Response(result)
