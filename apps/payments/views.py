from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsManager, IsAdmin
from apps.notifications.backends import get_backend
from apps.residents.models import ResidentPaymentStatus

from .models import Payment, PaymentStatus, SETTLED_STATUSES
from .serializers import (
    PaymentSerializer,
    RecentPaymentSerializer,
    PaymentFilterSerializer,
    RecordPaymentInputSerializer,
    RunDateInputSerializer,
    SweepResultSerializer,
    ReminderResultSerializer,
    OpenCycleResultSerializer,
)
from .services import (
    get_engine,
    PaymentValidationError,
    NotFoundError,
    PaymentNotFoundError,
    DuplicatePaymentPeriodError,
)

RECENT_PAYMENTS_LIMIT = 10


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


def _error(exc, http_status):
    return Response({'error': str(exc), 'code': exc.code}, status=http_status)


class PaymentPagination(PageNumberPagination):
    """Custom pagination for payments."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Payments and payment-status operations.

    Every state change is delegated to PaymentStatusEngine.

    list: Payments, newest first (filter by resident, status, month, year)
    create: Record a payment (manager)
    retrieve: Payment detail
    validate: Confirm a payment (admin)
    pending / recent: Dashboard lists
    check_overdue / send_reminders / open_cycle: Batch operations (admin)
    """

    queryset = Payment.objects.select_related('resident')
    serializer_class = PaymentSerializer
    pagination_class = PaymentPagination
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'pending', 'recent']:
            return [IsAuthenticated()]
        if self.action == 'create':
            return [IsAuthenticated(), IsManager()]
        return [IsAuthenticated(), IsAdmin()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = PaymentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        for field in ('status', 'month', 'year'):
            if field in params:
                queryset = queryset.filter(**{field: params[field]})
        if 'resident' in params:
            queryset = queryset.filter(resident_id=params['resident'])

        return queryset

    @staticmethod
    def _run_date(request):
        serializer = RunDateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data.get('date')

    @extend_schema(request=RecordPaymentInputSerializer, responses={201: PaymentSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer})
    def create(self, request, *args, **kwargs):
        """Record a payment for a resident and period."""
        serializer = RecordPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = get_engine().record_payment(
                resident_id=data['resident'],
                amount=data['amount'],
                month=data.get('month'),
                year=data.get('year'),
            )
        except PaymentValidationError as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)
        except NotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        except DuplicatePaymentPeriodError as e:
            return _error(e, status.HTTP_409_CONFLICT)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: PaymentSerializer, 404: ErrorResponseSerializer})
    @action(detail=True, methods=['post'])
    def validate(self, request, pk=None):
        """
        Confirm a payment; the resident and all its tokens become paid.

        POST /api/payments/{id}/validate/
        """
        try:
            payment = get_engine().validate_payment(payment_id=pk)
        except PaymentNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)

        return Response(PaymentSerializer(payment).data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        """
        Unsettled payments, earliest due date first.

        GET /api/payments/pending/
        """
        payments = self.get_queryset().filter(
            status__in=[PaymentStatus.PENDING, PaymentStatus.OVERDUE]
        ).order_by('due_date')
        return Response(PaymentSerializer(payments, many=True).data)

    @extend_schema(responses={200: RecentPaymentSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def recent(self, request):
        """
        Latest settled payments.

        GET /api/payments/recent/
        """
        payments = self.get_queryset().filter(
            status__in=SETTLED_STATUSES
        ).order_by('-payment_date')[:RECENT_PAYMENTS_LIMIT]
        return Response(RecentPaymentSerializer(payments, many=True).data)

    @extend_schema(request=RunDateInputSerializer, responses={200: SweepResultSerializer})
    @action(detail=False, methods=['post'], url_path='check-overdue')
    def check_overdue(self, request):
        """
        Mark pending residents overdue after the grace period and notify them.

        POST /api/payments/check-overdue/
        """
        run_date = self._run_date(request)
        with get_backend() as backend:
            result = get_engine(backend).sweep_overdue(
                today=run_date, status=ResidentPaymentStatus.OVERDUE
            )
        return Response(result)

    @extend_schema(request=RunDateInputSerializer, responses={200: ReminderResultSerializer})
    @action(detail=False, methods=['post'], url_path='send-reminders')
    def send_reminders(self, request):
        """
        Remind pending residents due in the current cycle.

        POST /api/payments/send-reminders/
        """
        run_date = self._run_date(request)
        with get_backend() as backend:
            result = get_engine(backend).send_reminders(today=run_date)
        return Response(result)

    @extend_schema(request=RunDateInputSerializer, responses={200: OpenCycleResultSerializer})
    @action(detail=False, methods=['post'], url_path='open-cycle')
    def open_cycle(self, request):
        """
        Move paid residents due this cycle back to pending.

        POST /api/payments/open-cycle/
        """
        run_date = self._run_date(request)
        return Response(get_engine().open_billing_cycle(today=run_date))
