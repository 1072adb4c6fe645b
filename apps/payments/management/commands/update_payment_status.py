"""
Daily batch: mark residents with unpaid dues as late and notify them.

Does nothing during the first days of the month (grace period).

Usage:
    python manage.py update_payment_status
    python manage.py update_payment_status --date 2024-03-06 --no-notify
"""

from apps.notifications.backends import get_backend
from apps.payments.services import get_engine
from apps.residents.models import ResidentPaymentStatus

from ._base import BillingCommand, parse_run_date


class Command(BillingCommand):
    help = 'Mark pending residents past the grace period as late and send overdue notices'

    def add_arguments(self, parser):
        super().add_arguments(parser)
        parser.add_argument(
            '--no-notify',
            action='store_true',
            help='Update statuses without sending WhatsApp messages',
        )

    def handle(self, *args, **options):
        run_date = parse_run_date(options['date'])

        with get_backend() as backend:
            result = get_engine(backend).sweep_overdue(
                today=run_date,
                status=ResidentPaymentStatus.LATE,
                notify=not options['no_notify'],
            )

        if result['skipped']:
            self.stdout.write(
                self.style.WARNING('Within grace period: no statuses updated.')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(f"✓ {result['updated_count']} resident(s) marked as late")
        )
        self.stdout.write(
            f"Notices sent: {result['notified_count']}, failed: {result['failed_count']}"
        )
        self.report_failures(result['failures'])
