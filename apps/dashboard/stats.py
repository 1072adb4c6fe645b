"""
Dashboard Statistics
====================

Read-only aggregate queries behind ``GET /api/dashboard/stats/``.

Classes:
    DashboardQueries: Static methods, one per block of the dashboard.

Example:
    Building the whole payload::

        from apps.dashboard.stats import DashboardQueries

        data = DashboardQueries.dashboard(today=date(2024, 3, 15))
        print(data['stats']['current_month_total'])

Note:
    This module doesn't modify any data. All amounts are Decimals; the
    standard monthly fee stands in for residents that owe dues but have no
    unsettled payment on file.
"""

from datetime import date, datetime, time
from decimal import Decimal

from django.db.models import Sum, Prefetch, DecimalField, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.notifications.services.sender import monthly_fee
from apps.payments.billing import previous_period
from apps.payments.models import Payment, PaymentStatus, SETTLED_STATUSES
from apps.residents.models import Resident, Token, ResidentPaymentStatus, TokenStatus, OVERDUE_STATUSES

UNSETTLED_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.OVERDUE)
OWING_RESIDENT_STATUSES = (ResidentPaymentStatus.PENDING,) + OVERDUE_STATUSES
RECENT_ACTIVITY_LIMIT = 5


def _month_start(today: date) -> datetime:
    return timezone.make_aware(datetime.combine(today.replace(day=1), time.min))


class DashboardQueries:
    """
    Queries for the dashboard.

    Methods:
        resident_counts: Total residents and those added this month.
        token_counts: Active tokens and those added this month.
        collections: Settled amounts this month vs. last month.
        pending: Residents owing dues, with amounts.
        recent_activity: Latest settled payments.
        dashboard: All of the above in one payload.
    """

    @staticmethod
    def resident_counts(today):
        total = Resident.objects.count()
        before_month = Resident.objects.filter(created_at__lt=_month_start(today)).count()
        return {
            'total_residents': total,
            'new_residents_this_month': total - before_month,
        }

    @staticmethod
    def token_counts(today):
        active = Token.objects.filter(status=TokenStatus.ACTIVE)
        total = active.count()
        before_month = active.filter(created_at__lt=_month_start(today)).count()
        return {
            'active_tokens': total,
            'new_tokens_this_month': total - before_month,
        }

    @staticmethod
    def _settled_total(year, month):
        return Payment.objects.filter(
            year=year, month=month, status__in=SETTLED_STATUSES
        ).aggregate(
            total=Coalesce(Sum('amount'), Value(Decimal('0.00')), output_field=DecimalField())
        )['total']

    @staticmethod
    def collections(today):
        """
        Settled amounts for the current and previous periods.

        ``percentage_change`` is 100 when nothing was collected last month.
        """
        current = DashboardQueries._settled_total(today.year, today.month)
        previous = DashboardQueries._settled_total(*previous_period(today.year, today.month))

        if previous == 0:
            change = Decimal('100')
        else:
            change = ((current - previous) / previous * 100).quantize(Decimal('0.01'))

        return {
            'current_month_total': current,
            'previous_month_total': previous,
            'percentage_change': change,
        }

    @staticmethod
    def pending():
        """
        Residents owing dues.

        A resident owes when its status is pending/overdue/late or it has an
        unsettled payment. Its amount is the sum of unsettled payments, or
        the standard fee when there are none.
        """
        unsettled = Payment.objects.filter(status__in=UNSETTLED_PAYMENT_STATUSES).order_by('due_date')
        residents = (
            Resident.objects.filter(payment_status__in=OWING_RESIDENT_STATUSES)
            | Resident.objects.filter(payments__status__in=UNSETTLED_PAYMENT_STATUSES)
        ).distinct().prefetch_related(Prefetch('payments', queryset=unsettled, to_attr='unsettled_payments'))

        fee = monthly_fee()
        rows = []
        total = Decimal('0.00')
        for resident in residents:
            payments = resident.unsettled_payments
            if payments:
                total += sum((p.amount for p in payments), Decimal('0.00'))
                first = payments[0]
                amount, due_date, state = first.amount, first.due_date, first.status
            else:
                total += fee
                amount, due_date, state = fee, resident.next_payment_date, resident.payment_status
            rows.append({
                'id': resident.id,
                'name': resident.full_name,
                'cedula': resident.cedula,
                'registration_number': resident.registration_number,
                'amount': amount,
                'due_date': due_date,
                'status': state,
            })

        return {
            'pending_payments_count': len(rows),
            'pending_payments_total': total,
            'pending_residents': rows,
        }

    @staticmethod
    def recent_activity(limit=RECENT_ACTIVITY_LIMIT):
        payments = (
            Payment.objects.filter(status__in=SETTLED_STATUSES)
            .select_related('resident')
            .order_by('-payment_date')[:limit]
        )
        return [
            {
                'id': payment.id,
                'resident_id': payment.resident_id,
                'resident_name': payment.resident.full_name,
                'registration_number': payment.resident.registration_number,
                'amount': payment.amount,
                'payment_date': payment.payment_date,
            }
            for payment in payments
        ]

    @staticmethod
    def dashboard(today=None):
        today = today or timezone.localdate()
        stats = {}
        stats.update(DashboardQueries.resident_counts(today))
        stats.update(DashboardQueries.token_counts(today))
        stats.update(DashboardQueries.collections(today))
        stats.update(DashboardQueries.pending())
        return {
            'stats': stats,
            'activities': DashboardQueries.recent_activity(),
        }
