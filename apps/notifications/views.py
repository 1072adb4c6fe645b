from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdmin
from apps.residents.models import Resident

from .backends import get_backend
from .models import Notification
from .serializers import (
    BulkSendInputSerializer,
    NotificationFilterSerializer,
    NotificationSerializer,
)
from .services import NotificationSender, EmptyMessageError, InvalidMessageTypeError


# Response serializers for API documentation
class BulkSendResultSerializer(drf_serializers.Serializer):
    resident_id = drf_serializers.IntegerField()
    name = drf_serializers.CharField()
    phone = drf_serializers.CharField()
    status = drf_serializers.CharField()
    error = drf_serializers.CharField(required=False)


class BulkSendSummarySerializer(drf_serializers.Serializer):
    total = drf_serializers.IntegerField()
    successful = drf_serializers.IntegerField()
    failed = drf_serializers.IntegerField()


class BulkSendResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    summary = BulkSendSummarySerializer()
    results = BulkSendResultSerializer(many=True)


class BackendStatusSerializer(drf_serializers.Serializer):
    backend = drf_serializers.CharField()
    is_ready = drf_serializers.BooleanField()


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Notification log (read only).

    list: All notifications, newest first (filter by resident, type)
    retrieve: One notification
    """

    queryset = Notification.objects.select_related('resident')
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = NotificationFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'resident' in params:
            queryset = queryset.filter(resident_id=params['resident'])
        if 'type' in params:
            queryset = queryset.filter(type=params['type'])

        return queryset


@extend_schema(
    request=BulkSendInputSerializer,
    responses={
        200: BulkSendResponseSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Send one message type to every resident with a phone that matches the filters.",
    tags=['notifications'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def bulk_send(request):
    """Bulk WhatsApp sending."""
    serializer = BulkSendInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    filters = data.get('filters') or {}

    residents = Resident.objects.exclude(phone='')
    if filters.get('payment_status'):
        residents = residents.filter(payment_status=filters['payment_status'])
    if filters.get('has_tokens') is True:
        residents = residents.filter(tokens__isnull=False).distinct()
    elif filters.get('has_tokens') is False:
        residents = residents.filter(tokens__isnull=True)

    residents = list(residents)
    if not residents:
        return Response(
            {'error': 'No residents found matching the criteria'},
            status=status.HTTP_404_NOT_FOUND
        )

    with get_backend() as backend:
        sender = NotificationSender(backend)
        try:
            result = sender.send_bulk(
                residents,
                data['message_type'],
                custom_message=data.get('custom_message'),
            )
        except (InvalidMessageTypeError, EmptyMessageError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Bulk WhatsApp sending completed',
        'summary': {
            'total': result['total'],
            'successful': result['successful'],
            'failed': result['failed'],
        },
        'results': result['results'],
    })


@extend_schema(
    responses={200: BackendStatusSerializer},
    description="Readiness of the configured WhatsApp backend.",
    tags=['notifications'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def backend_status(request):
    """Notification backend status."""
    return Response(get_backend().status())
